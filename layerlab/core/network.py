"""NeuralNetwork class - ordered layers of neurons with weighted connections."""

import copy
import logging
from dataclasses import dataclass, field, replace
from typing import Iterator

from layerlab.core.activation import ActivationKind
from layerlab.core.neuron import Connection, Layer, Neuron
from layerlab.init.ids import IdGenerator, UuidIdGenerator

logger = logging.getLogger(__name__)

NEURON_KEYS = frozenset({"bias", "activation", "target"})
CONNECTION_KEYS = frozenset({"weight"})


@dataclass
class NeuralNetwork:
    """A layered feed-forward network.

    Layer 0 is the input layer, the last layer is the output layer and
    everything in between is hidden. Connections refer to neurons by id and
    always point from a lower to a strictly higher layer index.

    Structural edits live in GraphEditor and numeric passes in the
    propagation module; both work on copies produced by clone(), so a
    network handed to them is never modified.

    Attributes:
        layers: Layers in feed-forward order.
        connections: Directed weighted edges (unordered).
        activation_function: Activation applied to every non-input neuron.
    """
    layers: list[Layer] = field(default_factory=list)
    connections: list[Connection] = field(default_factory=list)
    activation_function: ActivationKind = ActivationKind.SIGMOID

    def __post_init__(self) -> None:
        self.activation_function = ActivationKind(self.activation_function)

    @property
    def num_layers(self) -> int:
        return len(self.layers)

    @property
    def num_neurons(self) -> int:
        return sum(len(layer) for layer in self.layers)

    @property
    def input_layer(self) -> Layer:
        return self.layers[0]

    @property
    def output_layer(self) -> Layer:
        return self.layers[-1]

    @property
    def hidden_layers(self) -> list[Layer]:
        return self.layers[1:-1]

    def all_neurons(self) -> list[Neuron]:
        """Neurons of every layer, flattened in layer order."""
        return [n for layer in self.layers for n in layer.neurons]

    def neuron_map(self) -> dict[str, Neuron]:
        """Mapping from neuron id to neuron."""
        return {n.id: n for n in self.all_neurons()}

    def get_neuron(self, neuron_id: str) -> Neuron | None:
        for neuron in self.all_neurons():
            if neuron.id == neuron_id:
                return neuron
        return None

    def get_connection(self, connection_id: str) -> Connection | None:
        for conn in self.connections:
            if conn.id == connection_id:
                return conn
        return None

    def find_connection(self, from_id: str, to_id: str) -> Connection | None:
        """Find the connection from one neuron to another, if any."""
        for conn in self.connections:
            if conn.from_neuron_id == from_id and conn.to_neuron_id == to_id:
                return conn
        return None

    def is_connected(self, from_id: str, to_id: str) -> bool:
        """Check if two neurons are connected."""
        return self.find_connection(from_id, to_id) is not None

    def incoming(self, neuron_id: str) -> list[Connection]:
        """Get all connections whose destination is the given neuron."""
        return [c for c in self.connections if c.to_neuron_id == neuron_id]

    def outgoing(self, neuron_id: str) -> list[Connection]:
        """Get all connections whose source is the given neuron."""
        return [c for c in self.connections if c.from_neuron_id == neuron_id]

    def connection_count(self) -> int:
        return len(self.connections)

    def clone(self) -> "NeuralNetwork":
        """Full independent deep copy."""
        return copy.deepcopy(self)

    def reindex(self) -> None:
        """Recompute layer_index and neuron_index from list positions, in place."""
        for layer_index, layer in enumerate(self.layers):
            for neuron_index, neuron in enumerate(layer.neurons):
                neuron.layer_index = layer_index
                neuron.neuron_index = neuron_index

    def reset(self) -> "NeuralNetwork":
        """Return a copy with every non-input activation cleared to 0.

        Weights, biases, targets and topology are left untouched.
        """
        network = self.clone()
        for layer in network.layers[1:]:
            for neuron in layer.neurons:
                neuron.activation = 0.0
        return network

    def set_activation_function(self, kind: ActivationKind | str) -> "NeuralNetwork":
        return replace(self.clone(), activation_function=ActivationKind(kind))

    def set_value(self, element_id: str, key: str, value: float) -> "NeuralNetwork":
        """Set one numeric field of the neuron or connection with the given id.

        Neurons accept the keys bias, activation and target; connections
        accept weight. Any other combination, or an unknown id, returns the
        network unchanged.
        """
        if key in NEURON_KEYS and self.get_neuron(element_id) is not None:
            network = self.clone()
            setattr(network.get_neuron(element_id), key, float(value))
            return network
        if key in CONNECTION_KEYS and self.get_connection(element_id) is not None:
            network = self.clone()
            setattr(network.get_connection(element_id), key, float(value))
            return network
        logger.debug(f"Ignoring set_value({element_id!r}, {key!r})")
        return self

    def move_neuron(self, neuron_id: str, x: float, y: float) -> "NeuralNetwork":
        """Return a copy with the neuron's display coordinates updated."""
        if self.get_neuron(neuron_id) is None:
            return self
        network = self.clone()
        neuron = network.get_neuron(neuron_id)
        neuron.x = float(x)
        neuron.y = float(y)
        return network

    def validate(self) -> list[str]:
        """Check the structural invariants.

        Returns:
            Human readable descriptions of every violation found. An empty
            list means the network is consistent.
        """
        problems = []
        if self.num_layers < 2:
            problems.append(f"network needs at least 2 layers, has {self.num_layers}")

        seen: set[str] = set()
        layer_of: dict[str, int] = {}
        for layer_index, layer in enumerate(self.layers):
            if not layer.neurons:
                problems.append(f"layer {layer.id!r} has no neurons")
            for neuron_index, neuron in enumerate(layer.neurons):
                if neuron.id in seen:
                    problems.append(f"duplicate neuron id {neuron.id!r}")
                seen.add(neuron.id)
                layer_of[neuron.id] = layer_index
                if neuron.layer_index != layer_index:
                    problems.append(
                        f"neuron {neuron.id!r} has layer_index {neuron.layer_index}, "
                        f"expected {layer_index}"
                    )
                if neuron.neuron_index != neuron_index:
                    problems.append(
                        f"neuron {neuron.id!r} has neuron_index {neuron.neuron_index}, "
                        f"expected {neuron_index}"
                    )

        pairs: set[tuple[str, str]] = set()
        for conn in self.connections:
            src = layer_of.get(conn.from_neuron_id)
            dst = layer_of.get(conn.to_neuron_id)
            if src is None or dst is None:
                problems.append(f"connection {conn.id!r} references a missing neuron")
                continue
            if src >= dst:
                problems.append(
                    f"connection {conn.id!r} goes from layer {src} to layer {dst}"
                )
            pair = (conn.from_neuron_id, conn.to_neuron_id)
            if pair in pairs:
                problems.append(f"duplicate connection {pair[0]!r} -> {pair[1]!r}")
            pairs.add(pair)
        return problems

    def __iter__(self) -> Iterator[Layer]:
        """Iterate over layers."""
        return iter(self.layers)

    def __len__(self) -> int:
        return len(self.layers)

    def __repr__(self) -> str:
        sizes = [len(layer) for layer in self.layers]
        return (
            f"NeuralNetwork(layers={sizes}, "
            f"connections={self.connection_count()}, "
            f"activation={self.activation_function.value})"
        )


def create_initial_network(ids: IdGenerator | None = None) -> NeuralNetwork:
    """Build the seed network: 2 inputs, 2 hidden neurons, 1 output.

    Inputs are preset to [1, 0] and the output target to 1, with fixed
    weights so results are reproducible.

    Args:
        ids: Generator for neuron and connection ids. Defaults to uuid4.
    """
    ids = ids or UuidIdGenerator()

    i1 = Neuron(ids.new_id(), 0, 0, x=100.0, y=150.0, activation=1.0)
    i2 = Neuron(ids.new_id(), 0, 1, x=100.0, y=250.0, activation=0.0)
    h1 = Neuron(ids.new_id(), 1, 0, x=250.0, y=150.0)
    h2 = Neuron(ids.new_id(), 1, 1, x=250.0, y=250.0)
    out = Neuron(ids.new_id(), 2, 0, x=400.0, y=200.0, target=1.0)

    seed_weights = [
        (i1, h1, 0.5),
        (i1, h2, -0.3),
        (i2, h1, 0.8),
        (i2, h2, 0.2),
        (h1, out, 0.7),
        (h2, out, -0.4),
    ]
    connections = [
        Connection(ids.new_id(), src.id, dst.id, weight)
        for src, dst, weight in seed_weights
    ]

    return NeuralNetwork(
        layers=[
            Layer("layer-0", [i1, i2]),
            Layer("layer-1", [h1, h2]),
            Layer("layer-2", [out]),
        ],
        connections=connections,
        activation_function=ActivationKind.SIGMOID,
    )
