import os

# Tests compare against NumPy arrays; keep every tensor on the CPU
os.environ.setdefault("LAYERGRAPH_CPU", "1")

import numpy as np
import pytest


class ScriptedRng:
    """Random source returning a fixed sequence of uniform draws."""

    def __init__(self, draws):
        self.draws = np.asarray(draws, dtype=np.float64)
        self.calls = 0

    def random(self, size=None):
        self.calls += 1
        return self.draws.reshape(size)


@pytest.fixture
def scripted_rng():
    return ScriptedRng
