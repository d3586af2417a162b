"""Training configuration."""

from dataclasses import dataclass


@dataclass
class TrainingConfig:
    """Configuration for a single backpropagation training step.

    Each step applies, for every connection and every non-input neuron:
        weight += learning_rate * source.activation * destination.delta
        bias += learning_rate * delta

    Attributes:
        learning_rate: Step size for weight and bias updates. Default 0.1.
    """
    learning_rate: float = 0.1
