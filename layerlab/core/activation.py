"""Activation functions and their output-based derivatives."""

from enum import Enum

import numpy as np
from scipy.special import expit


class ActivationKind(str, Enum):
    """The global nonlinearity applied to every non-input neuron."""
    SIGMOID = "sigmoid"
    RELU = "relu"
    TANH = "tanh"


def sigmoid(x: float) -> float:
    """Logistic sigmoid 1 / (1 + e^-x)."""
    return float(expit(x))


def relu(x: float) -> float:
    """ReLU activation function."""
    return float(np.maximum(0.0, x))


def tanh(x: float) -> float:
    return float(np.tanh(x))


def sigmoid_derivative(y: float) -> float:
    return y * (1.0 - y)


def relu_derivative(y: float) -> float:
    return 1.0 if y > 0 else 0.0


def tanh_derivative(y: float) -> float:
    return 1.0 - y * y


_FUNCTIONS = {
    ActivationKind.SIGMOID: sigmoid,
    ActivationKind.RELU: relu,
    ActivationKind.TANH: tanh,
}

_DERIVATIVES = {
    ActivationKind.SIGMOID: sigmoid_derivative,
    ActivationKind.RELU: relu_derivative,
    ActivationKind.TANH: tanh_derivative,
}


def value(kind: ActivationKind | str, x: float) -> float:
    """Apply the activation function of the given kind to x.

    Args:
        kind: Activation kind, as an ActivationKind or its string value.
        x: Pre-activation input (weighted sum plus bias).

    Returns:
        The neuron's output.

    Raises:
        ValueError: If kind does not name a supported activation.
    """
    return _FUNCTIONS[ActivationKind(kind)](x)


def derivative(kind: ActivationKind | str, y: float) -> float:
    """Local derivative of the activation, expressed in terms of its output.

    The argument is the already computed activation y, not the
    pre-activation input: sigmoid' = y(1 - y), relu' = 1 if y > 0 else 0,
    tanh' = 1 - y².

    Raises:
        ValueError: If kind does not name a supported activation.
    """
    return _DERIVATIVES[ActivationKind(kind)](y)
