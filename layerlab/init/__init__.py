"""Initialization strategies for new weights and identifiers."""

from layerlab.init.ids import (
    IdGenerator,
    UuidIdGenerator,
    SequentialIdGenerator,
)
from layerlab.init.distributions import (
    WeightDistribution,
    ConstantWeightDistribution,
    UniformWeightDistribution,
    NormalWeightDistribution,
)

__all__ = [
    "IdGenerator",
    "UuidIdGenerator",
    "SequentialIdGenerator",
    "WeightDistribution",
    "ConstantWeightDistribution",
    "UniformWeightDistribution",
    "NormalWeightDistribution",
]
