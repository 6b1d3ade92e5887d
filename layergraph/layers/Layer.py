from ..helpers.log import check


class Layer:
    """
    Named graph node. Reads the `data` of input tensors it does not own and
    writes the `data` of the output tensors it does own; backward reads its
    outputs' `deriv` and adds into its inputs' `deriv`.
    """

    def __init__(self, name, inputs):
        check(bool(name), "Layer name must not be empty")
        self.name = name
        self.inputs = list(inputs)  # not owned
        self.outputs = []           # owned, allocated by the subclass

    # Subclasses override as needed
    def forward(self, state):
        raise NotImplementedError

    def backward(self, state):
        # Must add into the inputs' deriv, never overwrite it
        raise NotImplementedError

    def clear_deriv(self):
        for out in self.outputs:
            out.zero_deriv()

    def weights(self):
        # Trainable tensors owned by this layer
        return []

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"
