"""layerlab - an editable feed-forward network engine with forward propagation and backpropagation."""

from layerlab.core.activation import ActivationKind
from layerlab.core.neuron import Neuron, Connection, Layer
from layerlab.core.network import NeuralNetwork, create_initial_network
from layerlab.core.learning import TrainingConfig
from layerlab.core.propagation import (
    TrainingResult,
    run_forward_propagation,
    run_training_step,
    compute_loss,
)
from layerlab.editor import GraphEditor, EditorConfig
from layerlab.exceptions import LayerlabError, NetworkLoadError

__all__ = [
    "ActivationKind",
    "Neuron",
    "Connection",
    "Layer",
    "NeuralNetwork",
    "create_initial_network",
    "TrainingConfig",
    "TrainingResult",
    "run_forward_propagation",
    "run_training_step",
    "compute_loss",
    "GraphEditor",
    "EditorConfig",
    "LayerlabError",
    "NetworkLoadError",
]
