from .Solver import Solver
from .SolverSGD import clipped_grad
from ..helpers.Backend import backend


class SolverAdam(Solver):
    """
    Adam. weight_prev holds the first moment; the second moment and the
    step count live on the solver and are reset at the start of each run.
    """

    def __init__(self, print_each, test_each, save_each, lr_scale_each, lr_scale,
                 beta1=0.9, beta2=0.999, eps=1e-8, reg=0.0, clip=0.0, **kwargs):
        super().__init__(print_each, test_each, save_each, lr_scale_each, lr_scale, **kwargs)
        self.beta1 = float(beta1)
        self.beta2 = float(beta2)
        self.eps = float(eps)
        self.reg = float(reg)
        self.clip = float(clip)
        self.t = 0
        self._v = []

    def _reset_state(self):
        self.t = 0
        self._v = [backend.zeros_like(w.data) for w in self.weight]

    def learn(self, model, learning_rate):
        self.t += 1
        b1t = 1.0 - self.beta1 ** self.t
        b2t = 1.0 - self.beta2 ** self.t
        for w, m, v in zip(self.weight, self.weight_prev, self._v):
            if w.deriv is None:
                continue
            g = clipped_grad(w, self.reg, self.clip)
            # Adam moments (in-place)
            m.data[...] = self.beta1 * m.data + (1.0 - self.beta1) * g
            v[...] = self.beta2 * v + (1.0 - self.beta2) * (g * g)
            m_hat = m.data / b1t
            v_hat = v / b2t
            w.data -= learning_rate * (m_hat / (backend.sqrt(v_hat) + self.eps))
