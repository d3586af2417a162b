"""Weight initialization distributions."""

from typing import Protocol, runtime_checkable
import numpy as np

@runtime_checkable
class WeightDistribution(Protocol):
    """Protocol for weight initialization distributions."""

    def sample(self, rng: np.random.Generator) -> float:
        """Sample a weight from the distribution.

        Args:
            rng: Random number generator to use.

        Returns:
            Sampled weight value.
        """
        ...

class ConstantWeightDistribution:
    """Always returns a constant weight."""

    def __init__(self, value: float = 1.0):
        self.value = value

    def sample(self, rng: np.random.Generator) -> float:
        return float(self.value)

class UniformWeightDistribution:
    """Uniform distribution between low and high."""

    def __init__(self, low: float = -1.0, high: float = 1.0):
        self.low = low
        self.high = high

    def sample(self, rng: np.random.Generator) -> float:
        return float(rng.uniform(self.low, self.high))

class NormalWeightDistribution:
    """Normal (Gaussian) distribution, clipped to [low, high] when given."""

    def __init__(
        self,
        mean: float = 0.0,
        std: float = 1.0,
        low: float | None = None,
        high: float | None = None,
    ):
        self.mean = mean
        self.std = std
        self.low = low
        self.high = high

    def sample(self, rng: np.random.Generator) -> float:
        w = rng.normal(self.mean, self.std)
        if self.low is not None or self.high is not None:
            w = np.clip(w, self.low, self.high)
        return float(w)
