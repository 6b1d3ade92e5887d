import os

import numpy as np
import pytest

from layergraph import CheckError, Model, Param, Solver, State, Tensor, backend, get_solver
from layergraph.helpers.logger import RunLogger
from layergraph.layers import Dropout, EltwiseMult


class CountingModel(Model):
    """Model stub that records when the solver calls it."""

    def __init__(self, name="net", weights=None, fail_save_at=None, raise_on_save=False):
        super().__init__(name)
        self.weights = weights if weights is not None else [Tensor((2, 3)), Tensor(4)]
        self.fail_save_at = fail_save_at
        self.raise_on_save = raise_on_save
        self.steps = 0
        self.tested_at = []
        self.saved = []
        self.get_weight_calls = 0

    def get_weight(self):
        self.get_weight_calls += 1
        return self.weights

    def train(self):
        self.steps += 1
        return 1.0 / self.steps

    def test(self):
        self.tested_at.append(self.steps)
        return 0.5

    def save(self, path):
        if self.raise_on_save:
            raise OSError("disk full")
        self.saved.append((self.steps, path))
        return self.steps != self.fail_save_at


class RecordingSolver(Solver):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.lrs = []
        self.snapshots = []

    def learn(self, model, learning_rate):
        self.lrs.append(learning_rate)
        self.snapshots.append((list(self.weight), list(self.weight_prev)))


def fired(every, num_steps):
    return [s + 1 for s in range(num_steps) if (s + 1) % every == 0 or s == num_steps - 1]


def test_missing_model_fails(capsys):
    solver = RecordingSolver(1, 1, 1, 1, 1.0)
    assert solver.train(None, 10, 0.1) is False
    assert solver.lrs == []
    assert "Invalid model" in capsys.readouterr().err


def test_zero_steps_still_fetches_and_clears_weights():
    model = CountingModel()
    solver = RecordingSolver(1, 1, 1, 1, 1.0)
    assert solver.train(model, 0, 0.1) is True
    assert model.get_weight_calls == 1
    assert model.steps == 0
    assert model.saved == [] and model.tested_at == []
    assert solver.weight == [] and solver.weight_prev == []


def test_snapshots_match_model_weights():
    model = CountingModel()
    solver = RecordingSolver(100, 100, 100, 100, 1.0)
    assert solver.train(model, 2, 0.1)

    weight, weight_prev = solver.snapshots[0]
    assert weight == model.weights
    assert [w.size for w in weight_prev] == [(2, 3), (4,)]
    for prev in weight_prev:
        assert prev.deriv is None
        assert not prev.data.any()
    assert solver.weight == [] and solver.weight_prev == []


def test_snapshots_are_fresh_each_run():
    model = CountingModel()
    solver = RecordingSolver(100, 100, 100, 100, 1.0)
    solver.train(model, 1, 0.1)
    solver.train(model, 1, 0.1)
    assert model.get_weight_calls == 2
    first, second = solver.snapshots[0][1], solver.snapshots[1][1]
    assert all(a is not b for a, b in zip(first, second))


def test_print_fires_on_cadence_and_final_step(tmp_path, capsys):
    model = CountingModel()
    logger = RunLogger(root=tmp_path, tag="t")
    solver = RecordingSolver(3, 100, 100, 100, 1.0, save_dir=str(tmp_path), run_logger=logger)
    assert solver.train(model, 10, 0.1)

    loss_steps = [s for s, _ in logger.history()["loss"]]
    assert loss_steps == [3, 6, 9, 10]
    out = capsys.readouterr().out
    assert out.count(": lr = ") == 4
    assert "Step 10: lr = 0.100000, loss = 0.100000" in out
    # save cadence larger than the run: only the final step saves
    assert [step for step, _ in model.saved] == [10]


@pytest.mark.parametrize("test_each,num_steps", [(1, 5), (2, 5), (4, 9), (7, 7)])
def test_test_fires_on_cadence_and_final_step(test_each, num_steps):
    model = CountingModel()
    solver = RecordingSolver(100, test_each, 100, 100, 1.0)
    assert solver.train(model, num_steps, 0.1)
    assert model.tested_at == fired(test_each, num_steps)


def test_accuracy_is_logged(tmp_path):
    model = CountingModel()
    logger = RunLogger(root=tmp_path, tag="t")
    solver = RecordingSolver(100, 2, 100, 100, 1.0, run_logger=logger)
    solver.train(model, 5, 0.1)
    assert logger.history()["accuracy"] == [(2, 0.5), (4, 0.5), (5, 0.5)]
    assert logger.json_path.exists()


def test_checkpoint_names_are_one_based(tmp_path):
    model = CountingModel(name="lstm")
    solver = RecordingSolver(100, 100, 2, 100, 1.0, save_dir=str(tmp_path))
    assert solver.train(model, 5, 0.1)
    assert model.saved == [
        (2, os.path.join(str(tmp_path), "lstm_2.model")),
        (4, os.path.join(str(tmp_path), "lstm_4.model")),
        (5, os.path.join(str(tmp_path), "lstm_5.model")),
    ]


def test_checkpoint_path_without_save_dir():
    solver = RecordingSolver(1, 1, 1, 1, 1.0)
    assert solver.checkpoint_path(CountingModel(name="gru"), 7) == "gru_7.model"


def test_failed_save_stops_the_run(tmp_path, capsys):
    model = CountingModel(fail_save_at=4)
    solver = RecordingSolver(100, 100, 2, 100, 1.0, save_dir=str(tmp_path))
    assert solver.train(model, 10, 0.1) is False
    assert model.steps == 4
    assert [step for step, _ in model.saved] == [2, 4]
    assert solver.weight == [] and solver.weight_prev == []
    assert "could not save" in capsys.readouterr().err


def test_save_raising_oserror_is_a_failure(tmp_path):
    model = CountingModel(raise_on_save=True)
    solver = RecordingSolver(100, 100, 3, 100, 1.0, save_dir=str(tmp_path))
    assert solver.train(model, 10, 0.1) is False
    assert model.steps == 3
    assert solver.weight == []


def test_learning_rate_decays_without_final_step_exception(capsys):
    model = CountingModel()
    solver = RecordingSolver(100, 100, 100, 4, 0.5)
    assert solver.train(model, 10, 1.0)
    assert solver.lrs == [1.0] * 4 + [0.5] * 4 + [0.25] * 2
    out = capsys.readouterr().out
    assert out.count("Update learning rate") == 2
    assert "Step 8: Update learning rate from 0.500000 to 0.250000, scale 0.500000" in out


def test_learning_rate_decay_on_last_step_still_happens_once():
    model = CountingModel()
    solver = RecordingSolver(100, 100, 100, 5, 0.1)
    solver.train(model, 10, 1.0)
    assert solver.lrs[:5] == [1.0] * 5
    assert solver.lrs[5:] == pytest.approx([0.1] * 5)


def test_learning_rate_is_not_carried_across_runs():
    model = CountingModel()
    solver = RecordingSolver(100, 100, 100, 1, 0.5)
    solver.train(model, 2, 1.0)
    solver.train(model, 1, 1.0)
    assert solver.lrs == [1.0, 0.5, 1.0]


def test_counters_are_independent():
    model = CountingModel()
    solver = RecordingSolver(2, 3, 4, 100, 1.0, save_dir=None)
    assert solver.train(model, 6, 0.1)
    assert model.tested_at == [3, 6]
    assert [step for step, _ in model.saved] == [4, 6]


@pytest.mark.parametrize("args", [(0, 1, 1, 1, 1.0), (1, 0, 1, 1, 1.0), (1, 1, 0, 1, 1.0),
                                  (1, 1, 1, 0, 1.0), (1, 1, 1, 1, 0.0)])
def test_invalid_cadence_or_scale_fails(args):
    with pytest.raises(CheckError):
        RecordingSolver(*args)


def test_base_learn_is_abstract():
    solver = Solver(1, 1, 1, 1, 1.0)
    with pytest.raises(NotImplementedError):
        solver.train(CountingModel(), 1, 0.1)
    assert solver.weight == []


class GateModel(Model):
    """y = w . dropout(x) fitted to 2x; trains the solver end to end."""

    def __init__(self, drop_prob):
        super().__init__("gate")
        self.x = Tensor.from_array(np.linspace(0.5, 1.5, 8))
        self.target = 2.0 * self.x.data
        self.w = Tensor(self.x.size)
        self.dropout = Dropout("drop", [self.x], Param(drop_prob=drop_prob, seed=0))
        self.mult = EltwiseMult("mult", [self.dropout.outputs[0], self.w])
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
        y.deriv[...] = diff
        for layer in reversed(self.layers):
            layer.backward(state)
        return float(0.5 * (diff * diff).sum())

    def test(self):
        y = self._forward(State.test())
        return float((abs(y.data - self.target) < 1e-2).mean())

    def save(self, path):
        np.savez(path + ".npz", w=backend.to_cpu(self.w.data))
        return True


@pytest.mark.parametrize("name,lr", [("sgd", 0.5), ("rmsprop", 0.05), ("adam", 0.05)])
def test_solvers_fit_the_gate(tmp_path, name, lr):
    model = GateModel(drop_prob=0.0)
    solver = get_solver(name, 50, 50, 1000, 1000, 1.0, save_dir=str(tmp_path))
    assert solver.train(model, 400, lr)
    np.testing.assert_allclose(model.w.data, 2.0, atol=5e-2)
    assert model.test() == 1.0
    assert (tmp_path / "gate_400.model.npz").exists()


def test_dropout_in_the_loop_keeps_mask_out_of_the_update(tmp_path):
    model = GateModel(drop_prob=0.5)
    solver = get_solver("sgd", 10, 10, 100, 100, 1.0, save_dir=str(tmp_path))
    assert solver.train(model, 20, 0.1)
    assert model.get_weight() == [model.w]
    assert model.dropout.mask.deriv.any()


@pytest.mark.parametrize("each", [2.5, 2.0, "3", True])
def test_non_integer_cadence_fails(each):
    with pytest.raises(CheckError, match="positive integer"):
        RecordingSolver(each, 1, 1, 1, 1.0)


def test_numpy_integer_cadence_is_accepted():
    solver = RecordingSolver(np.int64(3), 1, 1, 1, 1.0)
    assert solver.print_each == 3


def test_learning_rate_report_is_ascii(capsys):
    solver = RecordingSolver(100, 100, 100, 1, 0.5)
    solver.train(CountingModel(), 1, 1.0)
    out = capsys.readouterr().out
    assert "Update learning rate" in out
    assert out.isascii()
