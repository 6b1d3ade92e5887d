from .Solver import Solver
from ..helpers.Backend import backend


def clipped_grad(w, reg, clip):
    """Gradient of `w` with L2 regularization, clamped to [-clip, clip] when clip > 0."""
    g = w.deriv
    if clip > 0:
        g = backend.clip(g, -clip, clip)
    if reg != 0.0:
        g = g + reg * w.data
    return g


class SolverSGD(Solver):
    """
    Stochastic gradient descent, with optional momentum.

    weight_prev holds the velocity: v = momentum * v - lr * g, w += v.
    """

    def __init__(self, print_each, test_each, save_each, lr_scale_each, lr_scale,
                 momentum=0.0, reg=0.0, clip=0.0, **kwargs):
        super().__init__(print_each, test_each, save_each, lr_scale_each, lr_scale, **kwargs)
        self.momentum = float(momentum)
        self.reg = float(reg)
        self.clip = float(clip)

    def learn(self, model, learning_rate):
        for w, v in zip(self.weight, self.weight_prev):
            if w.deriv is None:
                continue
            g = clipped_grad(w, self.reg, self.clip)
            if self.momentum != 0.0:
                v.data[...] = self.momentum * v.data - learning_rate * g
                w.data += v.data
            else:
                w.data -= learning_rate * g
