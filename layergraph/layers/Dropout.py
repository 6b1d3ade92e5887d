from .Layer import Layer
from ..Tensor import Tensor
from ..Param import Param
from ..helpers.Backend import backend
from ..helpers import log
from ..helpers.log import check, log_trace


class Dropout(Layer):
    """
    Inverted dropout over a single input.

    Kept elements are scaled by 1/(1-p) so the expected activation is
    unchanged; outside the training phase the layer is a plain copy.
    """

    def __init__(self, name, inputs, param=None):
        super().__init__(name, inputs)
        param = param or Param()
        check(len(self.inputs) == 1, "Layer '%s' must have 1 input", self.name)

        self.drop_prob = float(param.get("drop_prob"))
        check(0.0 <= self.drop_prob <= 1.0,
              "Layer '%s' drop_prob must be in [0, 1], got %f", self.name, self.drop_prob)

        # own generator, used when the state does not carry one
        self.rng = backend.default_rng(param.get("seed", None))

        x = self.inputs[0]
        self.mask = Tensor(x.size, dtype=x.dtype)
        self.outputs = [Tensor(x.size, dtype=x.dtype)]

    def clear_deriv(self):
        super().clear_deriv()
        self.mask.zero_deriv()

    def forward(self, state):
        x, out, mask = self.inputs[0], self.outputs[0], self.mask

        if not state.training:
            # mask keeps whatever the last training pass left in it
            out.data[...] = x.data
            return

        eps = backend.eps(x.dtype)
        if self.drop_prob < eps:
            # nothing to drop
            out.data[...] = x.data
            mask.set(1)
        elif self.drop_prob > 1.0 - eps:
            # drop everything
            out.zero()
            mask.zero()
        else:
            rng = state.rng if state.rng is not None else self.rng
            draws = backend.ensure_array(rng.random(mask.size))
            scale = 1.0 / (1.0 - self.drop_prob)
            mask.data[...] = (draws >= self.drop_prob) * scale
            out.data[...] = mask.data * x.data
            if log.TRACE:
                log_trace("Layer '%s': kept %d/%d", self.name,
                          int((mask.data != 0).sum()), mask.numel)

    def backward(self, state):
        x, out, mask = self.inputs[0], self.outputs[0], self.mask
        # in_deriv   += mask * out_deriv
        # mask_deriv += in * out_deriv
        x.deriv += mask.data * out.deriv
        mask.deriv += x.data * out.deriv
