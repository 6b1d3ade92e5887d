class Model:
    """
    Interface the solver trains against. Concrete models own their layer
    graph in `self.layers` (evaluation order) and their trainable tensors.
    """

    def __init__(self, name):
        self._name = name
        self.layers = []

    def name(self):
        return self._name

    # Subclasses override these
    def train(self):
        # One forward+backward pass over the graph; returns the loss
        raise NotImplementedError

    def test(self):
        # Returns the accuracy on held-out data
        raise NotImplementedError

    def save(self, path):
        # Persist the weights; returns True on success
        raise NotImplementedError

    def get_weight(self):
        # Trainable tensors of every layer, in layer order
        weights = []
        for layer in self.layers:
            weights.extend(layer.weights())
        return weights

    def clear_deriv(self):
        for layer in self.layers:
            layer.clear_deriv()
