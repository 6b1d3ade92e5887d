import numbers

import numpy as np
from .helpers.Backend import backend


class Tensor:
    """
    Numeric buffer `data` paired with a gradient buffer `deriv` of the same shape.

    Gradients accumulate: layers add into `deriv` and only zero_deriv()
    resets it, once per backward pass over the whole graph.
    """

    def __init__(self, size, with_deriv=True, dtype=None):
        if isinstance(size, numbers.Integral):
            size = (size,)
        self.size = tuple(int(s) for s in size)
        self.dtype = backend.default_float if dtype is None else dtype
        self.data = backend.zeros(self.size, dtype=self.dtype)
        self.deriv = backend.zeros(self.size, dtype=self.dtype) if with_deriv else None

    @classmethod
    def from_array(cls, values, with_deriv=True, dtype=None):
        arr = backend.ensure_array(values, dtype=backend.default_float if dtype is None else dtype)
        t = cls(arr.shape, with_deriv=with_deriv, dtype=arr.dtype)
        t.data[...] = arr
        return t

    @property
    def numel(self):
        n = 1
        for s in self.size:
            n *= s
        return n

    def zero(self):
        self.data[...] = 0

    def set(self, value):
        self.data[...] = value

    def zero_deriv(self):
        if self.deriv is not None:
            self.deriv[...] = 0

    def copy_from(self, other):
        # element-wise copy; shapes may differ as long as element counts match
        self.data[...] = backend.reshape(other.data, self.size)

    def __repr__(self):
        return f"Tensor(size={self.size}, dtype={np.dtype(self.dtype).name})"
