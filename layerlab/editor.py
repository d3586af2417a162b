"""GraphEditor - structural editing of layered networks."""

import logging
from dataclasses import dataclass

import numpy as np

from layerlab.core.network import NeuralNetwork
from layerlab.core.neuron import Connection, Layer, Neuron
from layerlab.init.distributions import (
    WeightDistribution,
    UniformWeightDistribution,
)
from layerlab.init.ids import IdGenerator, UuidIdGenerator

logger = logging.getLogger(__name__)


@dataclass
class EditorConfig:
    """Limits and layout constants for structural edits.

    Attributes:
        max_layers: Hard cap on the number of layers, input and output
            included. Default 10.
        layer_spacing: Horizontal distance between adjacent layers.
        neuron_spacing: Vertical distance between neurons of a layer.
        center_y: Vertical center new layers are laid out around.
    """
    max_layers: int = 10
    layer_spacing: float = 150.0
    neuron_spacing: float = 100.0
    center_y: float = 200.0


class GraphEditor:
    """Applies structural edits while keeping the network consistent.

    Every operation takes a network and returns an edited copy. When an edit
    is not possible (layer cap reached, last neuron of a layer, backward or
    duplicate connection, unknown id) the input network itself is returned
    unchanged; these are routine outcomes of interactive editing, not errors.

    New connections get weights sampled from ``weights`` and new elements
    get ids from ``ids``.

    Example:
        editor = GraphEditor(seed=42)
        network = create_initial_network()
        network = editor.add_layer(network)
        network = editor.add_neuron_to_layer(network, 1)

    Args:
        config: Limits and layout constants.
        weights: Distribution for new connection weights. Defaults to
            uniform over [-1, 1].
        ids: Id generator. Defaults to uuid4 strings.
        seed: Seed for the random number generator.
    """

    def __init__(
        self,
        config: EditorConfig | None = None,
        weights: WeightDistribution | None = None,
        ids: IdGenerator | None = None,
        seed: int | None = None,
    ) -> None:
        self.config = config or EditorConfig()
        self.weights = weights or UniformWeightDistribution(-1.0, 1.0)
        self.ids = ids or UuidIdGenerator()
        self.rng = np.random.default_rng(seed)

    def _connect(self, network: NeuralNetwork, from_id: str, to_id: str) -> Connection:
        conn = Connection(
            id=self.ids.new_id(),
            from_neuron_id=from_id,
            to_neuron_id=to_id,
            weight=self.weights.sample(self.rng),
        )
        network.connections.append(conn)
        return conn

    def _connect_layers(self, network: NeuralNetwork, src: Layer, dst: Layer) -> None:
        """Fully connect src to dst, skipping pairs that are already connected."""
        existing = {(c.from_neuron_id, c.to_neuron_id) for c in network.connections}
        for a in src.neurons:
            for b in dst.neurons:
                if (a.id, b.id) not in existing:
                    self._connect(network, a.id, b.id)

    def add_layer(self, network: NeuralNetwork) -> NeuralNetwork:
        """Insert a hidden layer just before the output layer.

        The new layer copies the neuron count of the layer it follows. Direct
        connections from that layer to the output are dropped, and both
        gaps are fully connected with fresh random weights.
        """
        cfg = self.config
        if network.num_layers >= cfg.max_layers:
            logger.debug(f"add_layer rejected: already {network.num_layers} layers")
            return network

        result = network.clone()
        insertion_index = result.num_layers - 1
        last_hidden = result.layers[insertion_index - 1]
        output = result.layers[insertion_index]

        count = len(last_hidden)
        start_y = cfg.center_y - (count - 1) * cfg.neuron_spacing / 2
        new_layer = Layer(
            id=f"layer-{self.ids.new_id()}",
            neurons=[
                Neuron(
                    id=self.ids.new_id(),
                    layer_index=insertion_index,
                    neuron_index=i,
                    x=last_hidden.neurons[0].x + cfg.layer_spacing,
                    y=start_y + i * cfg.neuron_spacing,
                )
                for i in range(count)
            ],
        )

        for neuron in output.neurons:
            neuron.x += cfg.layer_spacing

        result.layers.insert(insertion_index, new_layer)
        result.reindex()

        hidden_ids = last_hidden.neuron_ids
        output_ids = output.neuron_ids
        result.connections = [
            c for c in result.connections
            if not (c.from_neuron_id in hidden_ids and c.to_neuron_id in output_ids)
        ]
        self._connect_layers(result, last_hidden, new_layer)
        self._connect_layers(result, new_layer, output)

        logger.debug(f"Added layer {new_layer.id!r} with {count} neurons")
        return result

    def remove_layer(self, network: NeuralNetwork) -> NeuralNetwork:
        """Remove the last hidden layer and reconnect the gap it leaves."""
        if network.num_layers <= 2:
            logger.debug("remove_layer rejected: no hidden layer left")
            return network

        result = network.clone()
        removed = result.layers.pop(result.num_layers - 2)
        layer_before = result.layers[-2]
        output = result.output_layer

        for neuron in output.neurons:
            neuron.x -= self.config.layer_spacing
        result.reindex()

        removed_ids = removed.neuron_ids
        result.connections = [
            c for c in result.connections
            if c.from_neuron_id not in removed_ids and c.to_neuron_id not in removed_ids
        ]
        self._connect_layers(result, layer_before, output)

        logger.debug(f"Removed layer {removed.id!r}")
        return result

    def add_neuron_to_layer(self, network: NeuralNetwork, layer_index: int) -> NeuralNetwork:
        """Append a neuron to a layer, wired to both neighbouring layers.

        Args:
            network: Network to edit.
            layer_index: Index of the layer that receives the neuron.
        """
        if not 0 <= layer_index < network.num_layers:
            logger.debug(f"add_neuron_to_layer rejected: no layer {layer_index}")
            return network

        cfg = self.config
        result = network.clone()
        layer = result.layers[layer_index]
        neuron_index = len(layer)
        neuron = Neuron(
            id=self.ids.new_id(),
            layer_index=layer_index,
            neuron_index=neuron_index,
            x=layer.neurons[0].x,
            y=cfg.center_y + neuron_index * cfg.neuron_spacing,
        )
        layer.neurons.append(neuron)

        if layer_index > 0:
            for prev in result.layers[layer_index - 1].neurons:
                self._connect(result, prev.id, neuron.id)
        if layer_index < result.num_layers - 1:
            for nxt in result.layers[layer_index + 1].neurons:
                self._connect(result, neuron.id, nxt.id)

        logger.debug(f"Added neuron {neuron.id!r} to layer {layer_index}")
        return result

    def remove_neuron(self, network: NeuralNetwork, neuron_id: str) -> NeuralNetwork:
        """Delete a neuron and its connections. The last neuron of a layer stays."""
        target = network.get_neuron(neuron_id)
        if target is None:
            logger.debug(f"remove_neuron rejected: unknown neuron {neuron_id!r}")
            return network
        if len(network.layers[target.layer_index]) <= 1:
            logger.debug(f"remove_neuron rejected: {neuron_id!r} is alone in its layer")
            return network

        result = network.clone()
        layer = result.layers[target.layer_index]
        layer.neurons = [n for n in layer.neurons if n.id != neuron_id]
        result.connections = [
            c for c in result.connections
            if c.from_neuron_id != neuron_id and c.to_neuron_id != neuron_id
        ]
        result.reindex()

        logger.debug(f"Removed neuron {neuron_id!r}")
        return result

    def create_connection(
        self, network: NeuralNetwork, from_id: str, to_id: str
    ) -> NeuralNetwork:
        """Connect two neurons with a random weight.

        Rejected when either neuron is unknown, when the source layer is not
        strictly before the destination layer, or when the pair is already
        connected.
        """
        src = network.get_neuron(from_id)
        dst = network.get_neuron(to_id)
        if src is None or dst is None:
            logger.debug(f"create_connection rejected: unknown neuron in {from_id!r} -> {to_id!r}")
            return network
        if src.layer_index >= dst.layer_index:
            logger.debug(
                f"create_connection rejected: layer {src.layer_index} -> {dst.layer_index}"
            )
            return network
        if network.is_connected(from_id, to_id):
            logger.debug(f"create_connection rejected: {from_id!r} -> {to_id!r} exists")
            return network

        result = network.clone()
        conn = self._connect(result, from_id, to_id)
        logger.debug(f"Created connection {conn.id!r}")
        return result

    def delete_connection(self, network: NeuralNetwork, connection_id: str) -> NeuralNetwork:
        """Remove a connection by id."""
        if network.get_connection(connection_id) is None:
            logger.debug(f"delete_connection rejected: unknown connection {connection_id!r}")
            return network

        result = network.clone()
        result.connections = [c for c in result.connections if c.id != connection_id]
        return result
