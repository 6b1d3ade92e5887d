class State:
    """Execution context handed to every Forward/Backward call."""

    PHASE_TRAIN = "train"
    PHASE_TEST = "test"

    def __init__(self, phase=PHASE_TRAIN, rng=None):
        # rng: optional random source with random(shape); stochastic layers
        # use it instead of their own generator when set
        self.phase = phase
        self.rng = rng

    @property
    def training(self):
        return self.phase == State.PHASE_TRAIN

    @classmethod
    def train(cls, rng=None):
        return cls(cls.PHASE_TRAIN, rng=rng)

    @classmethod
    def test(cls, rng=None):
        return cls(cls.PHASE_TEST, rng=rng)
