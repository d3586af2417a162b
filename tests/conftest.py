import pytest

from layerlab.core.network import NeuralNetwork, create_initial_network
from layerlab.editor import GraphEditor
from layerlab.init.distributions import ConstantWeightDistribution
from layerlab.init.ids import SequentialIdGenerator


@pytest.fixture
def network() -> NeuralNetwork:
    """The seed network with readable ids (n-0 .. n-4, connections n-5 .. n-10)."""
    return create_initial_network(SequentialIdGenerator("n"))


@pytest.fixture
def editor() -> GraphEditor:
    return GraphEditor(ids=SequentialIdGenerator("e"), seed=42)


@pytest.fixture
def constant_editor() -> GraphEditor:
    return GraphEditor(
        weights=ConstantWeightDistribution(0.25),
        ids=SequentialIdGenerator("c"),
    )


def assert_consistent(network: NeuralNetwork, max_layers: int = 10) -> None:
    assert 2 <= network.num_layers <= max_layers
    assert network.validate() == []
