"""Save and load networks as JSON documents.

The document mirrors the data model with camelCase keys:

    {
      "layers": [{"id": ..., "neurons": [{"id": ..., "layerIndex": 0,
                  "neuronIndex": 0, "x": ..., "y": ..., "bias": ...,
                  "activation": ..., "target": ...}, ...]}, ...],
      "connections": [{"id": ..., "fromNeuronId": ..., "toNeuronId": ...,
                       "weight": ..., "gradient": ...}, ...],
      "activationFunction": "sigmoid"
    }

Optional neuron and connection fields are omitted when unset.
"""

import json
import logging
import math
import os
from typing import Any

from layerlab.core.activation import ActivationKind
from layerlab.core.network import NeuralNetwork
from layerlab.core.neuron import Connection, Layer, Neuron
from layerlab.exceptions import NetworkLoadError

logger = logging.getLogger(__name__)

# (json key, attribute, required)
_NEURON_FIELDS = [
    ("id", "id", True),
    ("layerIndex", "layer_index", True),
    ("neuronIndex", "neuron_index", True),
    ("x", "x", True),
    ("y", "y", True),
    ("bias", "bias", True),
    ("activation", "activation", True),
    ("target", "target", False),
    ("error", "error", False),
    ("delta", "delta", False),
]

_CONNECTION_FIELDS = [
    ("id", "id", True),
    ("fromNeuronId", "from_neuron_id", True),
    ("toNeuronId", "to_neuron_id", True),
    ("weight", "weight", True),
    ("gradient", "gradient", False),
]

_STRING_ATTRS = {"id", "from_neuron_id", "to_neuron_id"}
_INT_ATTRS = {"layer_index", "neuron_index"}


def _encode(obj: Any, fields: list[tuple[str, str, bool]]) -> dict[str, Any]:
    data = {}
    for key, attr, required in fields:
        val = getattr(obj, attr)
        if required or val is not None:
            data[key] = val
    return data


def to_dict(network: NeuralNetwork) -> dict[str, Any]:
    """Convert a network to a JSON-compatible dictionary."""
    return {
        "layers": [
            {
                "id": layer.id,
                "neurons": [_encode(n, _NEURON_FIELDS) for n in layer.neurons],
            }
            for layer in network.layers
        ],
        "connections": [_encode(c, _CONNECTION_FIELDS) for c in network.connections],
        "activationFunction": network.activation_function.value,
    }


def to_json(network: NeuralNetwork, indent: int | None = 2) -> str:
    """Serialize a network to a JSON string.

    Raises:
        ValueError: If any number in the network is NaN or infinite.
    """
    return json.dumps(to_dict(network), indent=indent, allow_nan=False)


def _decode_value(key: str, attr: str, val: Any, where: str) -> Any:
    if attr in _STRING_ATTRS:
        if not isinstance(val, str):
            raise ValueError(f"{where}.{key} must be a string, got {type(val).__name__}")
        return val
    # bool subclasses int
    if isinstance(val, bool) or not isinstance(val, (int, float)):
        raise ValueError(f"{where}.{key} must be a number, got {type(val).__name__}")
    if attr in _INT_ATTRS:
        if isinstance(val, float) and not val.is_integer():
            raise ValueError(f"{where}.{key} must be an integer, got {val}")
        return int(val)
    try:
        number = float(val)
    except OverflowError as e:
        raise ValueError(f"{where}.{key} is out of range") from e
    if not math.isfinite(number):
        raise ValueError(f"{where}.{key} must be finite, got {val}")
    return number


def _decode(data: Any, fields: list[tuple[str, str, bool]], where: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"{where} must be an object")
    kwargs = {}
    for key, attr, required in fields:
        val = data.get(key)
        if val is None:
            if required:
                raise ValueError(f"{where} is missing {key!r}")
            continue
        kwargs[attr] = _decode_value(key, attr, val, where)
    return kwargs


def _parse(data: Any) -> NeuralNetwork:
    if not isinstance(data, dict):
        raise ValueError("document must be a JSON object")

    layers_data = data.get("layers")
    if not isinstance(layers_data, list):
        raise ValueError("'layers' must be a list")
    connections_data = data.get("connections")
    if not isinstance(connections_data, list):
        raise ValueError("'connections' must be a list")

    layers = []
    for i, layer_data in enumerate(layers_data):
        where = f"layers[{i}]"
        if not isinstance(layer_data, dict):
            raise ValueError(f"{where} must be an object")
        layer_id = layer_data.get("id")
        if not isinstance(layer_id, str):
            raise ValueError(f"{where}.id must be a string")
        neurons_data = layer_data.get("neurons")
        if not isinstance(neurons_data, list):
            raise ValueError(f"{where}.neurons must be a list")
        neurons = [
            Neuron(**_decode(n, _NEURON_FIELDS, f"{where}.neurons[{j}]"))
            for j, n in enumerate(neurons_data)
        ]
        layers.append(Layer(id=layer_id, neurons=neurons))

    connections = [
        Connection(**_decode(c, _CONNECTION_FIELDS, f"connections[{i}]"))
        for i, c in enumerate(connections_data)
    ]

    # raises ValueError for unknown kinds
    kind = ActivationKind(data.get("activationFunction"))

    network = NeuralNetwork(layers=layers, connections=connections, activation_function=kind)

    ids = [c.id for c in connections]
    if len(set(ids)) != len(ids):
        raise ValueError("duplicate connection id")
    problems = network.validate()
    if problems:
        raise ValueError("; ".join(problems))
    return network


def from_dict(data: Any) -> NeuralNetwork:
    """Build a network from a decoded JSON document.

    Raises:
        NetworkLoadError: If the document does not describe a valid network.
    """
    try:
        return _parse(data)
    except ValueError as e:
        logger.warning(f"Rejected network document: {e}")
        raise NetworkLoadError(f"Invalid network document: {e}") from e


def from_json(text: str | bytes) -> NeuralNetwork:
    """Parse a network from a JSON string.

    Raises:
        NetworkLoadError: If the text is not JSON or does not describe a valid
            network.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError, RecursionError) as e:
        logger.warning(f"Could not decode network document: {e}")
        raise NetworkLoadError(f"Malformed JSON: {e}") from e
    return from_dict(data)


def save(network: NeuralNetwork, path: str | os.PathLike) -> None:
    """Write a network to a JSON file.

    Raises:
        ValueError: If any number in the network is NaN or infinite. The file
            is not touched in that case.
    """
    text = to_json(network)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    logger.info(f"Saved network to {path}")


def load(path: str | os.PathLike) -> NeuralNetwork:
    """Read a network from a JSON file.

    Raises:
        NetworkLoadError: If the file cannot be read or holds an invalid
            document.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read network file {path}: {e}")
        raise NetworkLoadError(f"Could not read {path}: {e}", {"path": str(path)}) from e
    network = from_json(text)
    logger.info(f"Loaded network from {path}")
    return network
