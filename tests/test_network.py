from layerlab.core.activation import ActivationKind
from layerlab.core.network import NeuralNetwork, create_initial_network
from layerlab.core.neuron import Connection, Layer, Neuron
from layerlab.core.propagation import run_forward_propagation
from layerlab.init.ids import SequentialIdGenerator, UuidIdGenerator

from conftest import assert_consistent


def test_initial_network_shape(network) -> None:
    assert [len(layer) for layer in network.layers] == [2, 2, 1]
    assert [layer.id for layer in network.layers] == ["layer-0", "layer-1", "layer-2"]
    assert network.connection_count() == 6
    assert network.activation_function == ActivationKind.SIGMOID
    assert [n.activation for n in network.input_layer.neurons] == [1.0, 0.0]
    assert network.output_layer.neurons[0].target == 1.0
    assert all(n.bias == 0.0 for n in network.all_neurons())
    assert_consistent(network)


def test_initial_network_weights(network) -> None:
    i1, i2 = network.input_layer.neurons
    h1, h2 = network.layers[1].neurons
    out = network.output_layer.neurons[0]

    expected = {
        (i1.id, h1.id): 0.5,
        (i1.id, h2.id): -0.3,
        (i2.id, h1.id): 0.8,
        (i2.id, h2.id): 0.2,
        (h1.id, out.id): 0.7,
        (h2.id, out.id): -0.4,
    }
    actual = {(c.from_neuron_id, c.to_neuron_id): c.weight for c in network.connections}
    assert actual == expected


def test_initial_network_is_reproducible() -> None:
    a = create_initial_network(SequentialIdGenerator("n"))
    b = create_initial_network(SequentialIdGenerator("n"))
    assert a == b


def test_initial_network_takes_id_generator_by_keyword() -> None:
    net = create_initial_network(ids=SequentialIdGenerator("seed"))
    assert [n.id for n in net.input_layer.neurons] == ["seed-0", "seed-1"]
    assert net.connections[-1].id == "seed-10"


def test_initial_network_default_ids_are_unique() -> None:
    net = create_initial_network()
    ids = [n.id for n in net.all_neurons()] + [c.id for c in net.connections]
    assert len(set(ids)) == len(ids)


def test_uuid_generator_never_repeats() -> None:
    gen = UuidIdGenerator()
    assert len({gen.new_id() for _ in range(100)}) == 100


def test_lookups(network) -> None:
    h1 = network.layers[1].neurons[0]
    assert network.get_neuron(h1.id) is h1
    assert network.get_neuron("missing") is None
    assert network.get_connection("missing") is None

    conn = network.connections[0]
    assert network.get_connection(conn.id) is conn
    assert network.find_connection(conn.from_neuron_id, conn.to_neuron_id) is conn
    assert network.find_connection(conn.to_neuron_id, conn.from_neuron_id) is None
    assert network.is_connected(conn.from_neuron_id, conn.to_neuron_id)

    assert len(network.incoming(h1.id)) == 2
    assert len(network.outgoing(h1.id)) == 1
    assert network.incoming("missing") == []


def test_all_neurons_in_layer_order(network) -> None:
    neurons = network.all_neurons()
    assert [n.layer_index for n in neurons] == [0, 0, 1, 1, 2]
    assert set(network.neuron_map()) == {n.id for n in neurons}
    assert network.num_neurons == 5
    assert len(network.hidden_layers) == 1


def test_reset_clears_non_input_activations(network) -> None:
    propagated = run_forward_propagation(network)
    reset = propagated.reset()

    assert [n.activation for n in reset.input_layer.neurons] == [1.0, 0.0]
    assert all(n.activation == 0.0 for layer in reset.layers[1:] for n in layer.neurons)
    assert [c.weight for c in reset.connections] == [c.weight for c in propagated.connections]
    assert reset.output_layer.neurons[0].target == 1.0
    assert propagated.output_layer.neurons[0].activation > 0


def test_reset_is_idempotent(network) -> None:
    once = run_forward_propagation(network).reset()
    assert once.reset() == once


def test_set_value_on_neuron(network) -> None:
    h1 = network.layers[1].neurons[0]
    updated = network.set_value(h1.id, "bias", 0.25)

    assert updated is not network
    assert updated.get_neuron(h1.id).bias == 0.25
    assert network.get_neuron(h1.id).bias == 0.0

    out = network.output_layer.neurons[0]
    assert network.set_value(out.id, "target", -0.5).get_neuron(out.id).target == -0.5


def test_set_value_on_connection(network) -> None:
    conn = network.connections[0]
    updated = network.set_value(conn.id, "weight", 1.5)
    assert updated.get_connection(conn.id).weight == 1.5


def test_set_value_rejects_invalid_targets(network) -> None:
    h1 = network.layers[1].neurons[0]
    conn = network.connections[0]

    assert network.set_value(h1.id, "weight", 1.0) is network
    assert network.set_value(conn.id, "bias", 1.0) is network
    assert network.set_value("missing", "bias", 1.0) is network
    assert network.set_value(h1.id, "layer_index", 4) is network


def test_set_activation_function(network) -> None:
    relu = network.set_activation_function("relu")
    assert relu.activation_function is ActivationKind.RELU
    assert network.activation_function is ActivationKind.SIGMOID


def test_move_neuron(network) -> None:
    h1 = network.layers[1].neurons[0]
    moved = network.move_neuron(h1.id, 12, 34)
    assert (moved.get_neuron(h1.id).x, moved.get_neuron(h1.id).y) == (12.0, 34.0)
    assert network.move_neuron("missing", 0, 0) is network


def test_validate_reports_problems() -> None:
    net = NeuralNetwork(
        layers=[
            Layer("in", [Neuron("a", 0, 0), Neuron("b", 0, 5)]),
            Layer("out", [Neuron("c", 3, 0)]),
            Layer("empty", []),
        ],
        connections=[
            Connection("x", "c", "a", 1.0),
            Connection("y", "a", "ghost", 1.0),
            Connection("z1", "a", "c", 1.0),
            Connection("z2", "a", "c", 1.0),
        ],
    )

    problems = net.validate()
    assert any("no neurons" in p for p in problems)
    assert any("neuron_index 5" in p for p in problems)
    assert any("layer_index 3" in p for p in problems)
    assert any("from layer 1 to layer 0" in p for p in problems)
    assert any("missing neuron" in p for p in problems)
    assert any("duplicate connection" in p for p in problems)


def test_validate_needs_two_layers() -> None:
    net = NeuralNetwork(layers=[Layer("only", [Neuron("a", 0, 0)])])
    assert net.validate() == ["network needs at least 2 layers, has 1"]
