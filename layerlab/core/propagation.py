"""Forward propagation and single-step backpropagation training."""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterator

from layerlab.core import activation
from layerlab.core.learning import TrainingConfig
from layerlab.core.network import NeuralNetwork
from layerlab.core.neuron import Connection

logger = logging.getLogger(__name__)


@dataclass
class TrainingResult:
    """Outcome of one training step.

    Attributes:
        network: The updated, independent copy of the network.
        loss: Mean squared error over the output neurons, measured after the
            forward pass and before the weight update.
    """
    network: NeuralNetwork
    loss: float

    def __iter__(self) -> Iterator:
        return iter((self.network, self.loss))


def _group_by(connections: list[Connection], attr: str) -> dict[str, list[Connection]]:
    grouped: dict[str, list[Connection]] = defaultdict(list)
    for conn in connections:
        grouped[getattr(conn, attr)].append(conn)
    return grouped


def _forward_in_place(network: NeuralNetwork, until_layer: int) -> None:
    neurons = network.neuron_map()
    incoming = _group_by(network.connections, "to_neuron_id")
    kind = network.activation_function

    for layer in network.layers[1:until_layer + 1]:
        for neuron in layer.neurons:
            weighted_sum = 0.0
            for conn in incoming[neuron.id]:
                source = neurons.get(conn.from_neuron_id)
                if source is not None:
                    weighted_sum += conn.weight * source.activation
            neuron.activation = activation.value(kind, weighted_sum + neuron.bias)


def run_forward_propagation(
    network: NeuralNetwork, until_layer: int | None = None
) -> NeuralNetwork:
    """Compute activations layer by layer on a copy of the network.

    Layer 0 holds externally supplied inputs and is never recomputed. Layers
    1 through until_layer are processed in increasing order, so each
    neuron sees the already updated activations of its sources.

    Args:
        network: Network to propagate. Left unmodified.
        until_layer: Last layer index to compute (inclusive). Defaults to the
            output layer; larger values are clamped to it.

    Returns:
        An independent copy of the network with updated activations.
    """
    result = network.clone()
    last = result.num_layers - 1
    if until_layer is None or until_layer > last:
        until_layer = last
    _forward_in_place(result, until_layer)
    return result


def run_training_step(
    network: NeuralNetwork,
    learning_rate: float | None = None,
    config: TrainingConfig | None = None,
) -> TrainingResult:
    """Run one forward pass, backpropagate, and update weights and biases.

    Output neurons get error = target - activation (target 0 when unset)
    and delta = error * f'(activation). Hidden deltas, from the last hidden
    layer down to layer 1, are the sum of weight * downstream delta over
    outgoing connections into the next layer, times f'(activation). Every
    connection whose destination has a delta gets gradient = source
    activation * destination delta and weight += learning_rate * gradient;
    every non-input neuron with a delta gets bias += learning_rate * delta.

    Args:
        network: Network to train. Left unmodified.
        learning_rate: Step size. Overrides config.learning_rate when given.
        config: Training configuration. Defaults to TrainingConfig().

    Returns:
        TrainingResult with the updated copy and the mean squared error.
    """
    config = config or TrainingConfig()
    if learning_rate is None:
        learning_rate = config.learning_rate

    result = run_forward_propagation(network)
    kind = result.activation_function

    output_layer = result.output_layer
    squared_error = 0.0
    for neuron in output_layer.neurons:
        target = neuron.target if neuron.target is not None else 0.0
        error = target - neuron.activation
        neuron.error = error
        neuron.delta = error * activation.derivative(kind, neuron.activation)
        squared_error += error ** 2
    loss = squared_error / len(output_layer.neurons)

    outgoing = _group_by(result.connections, "from_neuron_id")
    for i in range(result.num_layers - 2, 0, -1):
        next_layer = {n.id: n for n in result.layers[i + 1].neurons}
        for neuron in result.layers[i].neurons:
            downstream = 0.0
            for conn in outgoing[neuron.id]:
                next_neuron = next_layer.get(conn.to_neuron_id)
                if next_neuron is not None and next_neuron.delta is not None:
                    downstream += conn.weight * next_neuron.delta
            neuron.delta = downstream * activation.derivative(kind, neuron.activation)

    neurons = result.neuron_map()
    for conn in result.connections:
        source = neurons.get(conn.from_neuron_id)
        dest = neurons.get(conn.to_neuron_id)
        if source is None or dest is None or dest.delta is None:
            continue
        conn.gradient = source.activation * dest.delta
        conn.weight += learning_rate * conn.gradient

    for layer in result.layers[1:]:
        for neuron in layer.neurons:
            if neuron.delta is not None:
                neuron.bias += learning_rate * neuron.delta

    logger.debug(f"Training step with learning_rate={learning_rate}: loss={loss:.6f}")
    return TrainingResult(network=result, loss=loss)


def compute_loss(network: NeuralNetwork) -> float | None:
    """Mean squared error over output neurons that have a target.

    Returns:
        The loss, or None when no output neuron has a target.
    """
    errors = [
        (n.target - n.activation) ** 2
        for n in network.output_layer.neurons
        if n.target is not None
    ]
    if not errors:
        return None
    return sum(errors) / len(errors)
