import numpy as np

from layergraph import Model, Param, State, Tensor, backend, get_solver
from layergraph.layers import Dropout, EltwiseMult
from layergraph.helpers.logger import RunLogger


class GateModel(Model):
    """y = w . dropout(x), fitted to a fixed target with a squared loss."""

    def __init__(self, x, target, drop_prob=0.1, seed=None):
        super().__init__("gate")
        self.x = Tensor.from_array(x)
        self.target = backend.ensure_array(target, dtype=backend.default_float)
        self.w = Tensor(self.x.size)
        self.w.set(0.1)

        self.dropout = Dropout("drop", [self.x], Param(drop_prob=drop_prob, seed=seed))
        self.mult = EltwiseMult("gate", [self.dropout.outputs[0], self.w])
        self.layers = [self.dropout, self.mult]

    def get_weight(self):
        return [self.w]

    def _forward(self, state):
        for layer in self.layers:
            layer.forward(state)
        return self.mult.outputs[0]

    def train(self):
        state = State.train()
        y = self._forward(state)
        diff = y.data - self.target

        self.clear_deriv()
        self.x.zero_deriv()
        self.w.zero_deriv()
        y.deriv[...] = diff / y.numel
        for layer in reversed(self.layers):
            layer.backward(state)
        return float(backend.to_cpu(0.5 * backend.sum(diff * diff) / y.numel))

    def test(self):
        # fraction of outputs within 5% of the target
        y = self._forward(State.test())
        close = backend.abs(y.data - self.target) <= 0.05 * backend.abs(self.target)
        return float(backend.to_cpu(backend.mean(close)))

    def save(self, path):
        np.savez(path + ".npz", w=backend.to_cpu(self.w.data))
        return True


if __name__ == "__main__":
    # Example usage
    backend.seed(0)

    x = np.random.rand(64).astype(np.float32) + 0.5
    target = 3.0 * x
    model = GateModel(x, target, drop_prob=0.1, seed=0)

    logger = RunLogger(root="runs", tag="gate")
    solver = get_solver("adam", 100, 100, 500, 250, 0.5,
                        save_dir="runs/checkpoints", run_logger=logger)
    ok = solver.train(model, 1_000, 0.05)
    logger.plot_all(tag="gate")

    print(f"Training {'succeeded' if ok else 'failed'}")
    print(f"Mean gate value: {float(np.mean(backend.to_cpu(model.w.data))):.4f} (target 3.0)")
