"""Neuron, Connection and Layer - the elements of a layered network graph."""

from dataclasses import dataclass, field


@dataclass
class Neuron:
    """A computational unit placed in one layer of the network.

    Attributes:
        id: Opaque identifier, stable for the neuron's lifetime.
        layer_index: Position of the owning layer in the network.
        neuron_index: Position within the owning layer (contiguous from 0).
        x: Horizontal display coordinate.
        y: Vertical display coordinate.
        bias: Added to the weighted input sum before activation.
        activation: Current output. Set by the caller for input neurons,
            computed by forward propagation everywhere else.
        target: Desired output, only meaningful in the output layer.
        error: target - activation from the last training step (output layer).
        delta: Backward error signal from the last training step.
    """
    id: str
    layer_index: int
    neuron_index: int
    x: float = 0.0
    y: float = 0.0
    bias: float = 0.0
    activation: float = 0.0
    target: float | None = None
    error: float | None = None
    delta: float | None = None

    def __repr__(self) -> str:
        return (
            f"Neuron(id={self.id!r}, layer={self.layer_index}, "
            f"index={self.neuron_index}, activation={self.activation:.4f})"
        )


@dataclass
class Connection:
    """A directed weighted edge between two neurons, referenced by id.

    Attributes:
        id: Opaque identifier.
        from_neuron_id: Id of the source neuron.
        to_neuron_id: Id of the destination neuron.
        weight: Connection weight.
        gradient: source activation * destination delta from the last
            training step.
    """
    id: str
    from_neuron_id: str
    to_neuron_id: str
    weight: float = 0.0
    gradient: float | None = None


@dataclass
class Layer:
    """An ordered group of neurons at one depth of the network."""
    id: str
    neurons: list[Neuron] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.neurons)

    def __iter__(self):
        return iter(self.neurons)

    @property
    def neuron_ids(self) -> set[str]:
        return {n.id for n in self.neurons}
