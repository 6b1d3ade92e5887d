from .Solver import Solver
from .SolverSGD import clipped_grad
from ..helpers.Backend import backend


class SolverRMSprop(Solver):
    # weight_prev is the running average of squared gradients
    def __init__(self, print_each, test_each, save_each, lr_scale_each, lr_scale,
                 decay_rate=0.999, eps=1e-8, reg=0.0, clip=0.0, **kwargs):
        super().__init__(print_each, test_each, save_each, lr_scale_each, lr_scale, **kwargs)
        self.decay_rate = float(decay_rate)
        self.eps = float(eps)
        self.reg = float(reg)
        self.clip = float(clip)

    def learn(self, model, learning_rate):
        for w, cache in zip(self.weight, self.weight_prev):
            if w.deriv is None:
                continue
            g = clipped_grad(w, self.reg, self.clip)
            cache.data[...] = self.decay_rate * cache.data + (1.0 - self.decay_rate) * g * g
            w.data -= learning_rate * g / backend.sqrt(cache.data + self.eps)
