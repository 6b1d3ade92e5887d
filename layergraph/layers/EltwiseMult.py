from .Layer import Layer
from ..Tensor import Tensor
from ..helpers.log import check


class EltwiseMult(Layer):
    # out = in1 . in2 ("." = Hadamard product)
    def __init__(self, name, inputs, param=None):
        super().__init__(name, inputs)
        check(len(self.inputs) == 2, "Layer '%s' must have 2 inputs", self.name)
        check(self.inputs[0].numel == self.inputs[1].numel,
              "Layer '%s' inputs must have the same size", self.name)

        a = self.inputs[0]
        self.outputs = [Tensor(a.size, dtype=a.dtype)]

    def forward(self, state):
        a, b = self.inputs
        out = self.outputs[0]
        out.data[...] = a.data * b.data.reshape(a.size)

    def backward(self, state):
        a, b = self.inputs
        go = self.outputs[0].deriv
        # in1_deriv += in2 * out_deriv
        # in2_deriv += in1 * out_deriv
        a.deriv += b.data.reshape(a.size) * go
        b.deriv += (a.data * go).reshape(b.size)
