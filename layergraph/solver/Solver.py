import numbers
import os

from ..Tensor import Tensor
from ..helpers.log import LogLevel, check, report


class Solver:
    """
    Generic training loop.

    Runs `num_steps` training steps against a model and calls the update
    rule implemented by `learn()` after each one. Four independent
    counters drive the periodic side effects:

      print_each    : report step, learning rate and loss
      test_each     : report the model's test accuracy
      save_each     : checkpoint the model as <name>_<step>.model
      lr_scale_each : multiply the learning rate by lr_scale

    Print, test and save also fire on the final step; the learning rate
    scale does not.

    Every cadence must be a positive integer and lr_scale must be positive.
    A cadence of 0 (fire on every step) is rejected; use 1 instead.
    """

    def __init__(self, print_each, test_each, save_each, lr_scale_each, lr_scale,
                 save_dir=None, run_logger=None):
        for label, each in (("print_each", print_each), ("test_each", test_each),
                            ("save_each", save_each), ("lr_scale_each", lr_scale_each)):
            check(isinstance(each, numbers.Integral) and not isinstance(each, bool) and each > 0,
                  "Solver %s must be a positive integer, got %r", label, each)
        check(lr_scale > 0, "Solver lr_scale must be positive, got %s", lr_scale)

        self.print_each = int(print_each)
        self.test_each = int(test_each)
        self.save_each = int(save_each)
        self.lr_scale_each = int(lr_scale_each)
        self.lr_scale = float(lr_scale)
        self.save_dir = save_dir
        self.run_logger = run_logger

        self.weight = []       # model weights (current value), not owned
        self.weight_prev = []  # previous values / per-weight rule state

    # Subclasses override this
    def learn(self, model, learning_rate):
        raise NotImplementedError

    def _reset_state(self):
        # Extra per-run state for rules that need more than weight_prev
        pass

    def checkpoint_path(self, model, step):
        file_name = f"{model.name()}_{step}.model"
        if self.save_dir:
            return os.path.join(self.save_dir, file_name)
        return file_name

    def _save(self, model, step):
        path = self.checkpoint_path(model, step)
        try:
            if self.save_dir:
                os.makedirs(self.save_dir, exist_ok=True)
            saved = model.save(path)
        except OSError as e:
            report(LogLevel.ERROR, "Step %d: could not save model to '%s': %s", step, path, e)
            return False
        if not saved:
            report(LogLevel.ERROR, "Step %d: could not save model to '%s'", step, path)
            return False
        return True

    def train(self, model, num_steps, learning_rate):
        """
        Train `model` for `num_steps` steps.

        Returns False when the model is missing or a checkpoint could not
        be saved (the run stops at that step), True otherwise.
        """
        if model is None:
            report(LogLevel.ERROR, "Invalid model")
            return False

        # Get the model weights and keep track of the previous weights values
        self.weight = list(model.get_weight())
        self.weight_prev = [Tensor(w.size, with_deriv=False, dtype=w.dtype) for w in self.weight]
        self._reset_state()

        try:
            return self._run(model, int(num_steps), learning_rate)
        finally:
            self.weight = []
            self.weight_prev = []
            if self.run_logger is not None:
                self.run_logger.save_json()

    def _run(self, model, num_steps, learning_rate):
        n_print = 0
        n_test = 0
        n_save = 0
        n_lr = 0
        last = num_steps - 1
        for step in range(num_steps):
            loss = model.train()
            self.learn(model, learning_rate)

            n_print += 1
            if n_print >= self.print_each or step == last:
                report(LogLevel.INFO, "Step %d: lr = %f, loss = %f", step + 1, learning_rate, loss)
                if self.run_logger is not None:
                    self.run_logger.log_step(step + 1, lr=learning_rate, loss=loss)
                n_print = 0

            n_test += 1
            if n_test >= self.test_each or step == last:
                accuracy = model.test()
                report(LogLevel.INFO, "Step %d: accuracy = %f", step + 1, accuracy)
                if self.run_logger is not None:
                    self.run_logger.log_step(step + 1, accuracy=accuracy)
                n_test = 0

            n_save += 1
            if n_save >= self.save_each or step == last:
                if not self._save(model, step + 1):
                    return False
                n_save = 0

            n_lr += 1
            if n_lr >= self.lr_scale_each:
                new_lr = learning_rate * self.lr_scale
                report(LogLevel.INFO, "Step %d: Update learning rate from %f to %f, scale %f",
                       step + 1, learning_rate, new_lr, self.lr_scale)
                learning_rate = new_lr
                n_lr = 0

        return True
