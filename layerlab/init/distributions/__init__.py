from layerlab.init.distributions.weight import (
    WeightDistribution,
    ConstantWeightDistribution,
    UniformWeightDistribution,
    NormalWeightDistribution,
)

__all__ = [
    "WeightDistribution",
    "ConstantWeightDistribution",
    "UniformWeightDistribution",
    "NormalWeightDistribution",
]
