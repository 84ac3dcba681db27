"""
LayerNet Serializer Module

This module converts networks to and from a JSON document.

Loading happens in two explicit phases:
    1. parse_document(): validate the document and turn it into plain records
    2. build_network():  allocate the layers, link them into a network and
                         check that the result is consistent
A network is only handed to the caller once both phases succeeded.

Document format (format_version 1):
    {
        "format_version": 1,
        "learning_rate": 0.01,
        "cost": 0.0,
        "fitness": 0.0,
        "parameters": {"learningrate": "0.01", ...},
        "layers": [
            {"kind": "input", "activation": "sigmoid", "parameters": {},
             "neurons": [{"alias": "x"}, {"alias": "y"}]},
            {"kind": "output", "activation": "none", "parameters": {},
             "neurons": [{"alias": "z", "bias": 0.1, "weights": [0.5, -0.2]}]}
        ]
    }
Unknown keys are ignored and optional keys missing from a document take
their defaults, so documents written by newer versions remain loadable.

Classes:
    NeuronRecord:  Persisted state of a neuron
    LayerRecord:   Persisted state of a layer
    NetworkRecord: Persisted state of a network

Functions:
    network_to_record(network):    Capture the persistent state of a network
    record_to_document(record):    Convert a record to a JSON-compatible dict
    parse_document(document):      Validate a document and convert it to a record
    build_network(record, cls):    Assemble a linked network from a record
    dumps / loads:                 JSON string conversion
    save / load:                   JSON file persistence
"""

import json
import logging
import numpy as np
from pathlib import Path
from typing  import NamedTuple, TYPE_CHECKING

from layernet.activations import ActivationType
from layernet.errors      import ConfigurationError, SerializationError
from layernet.parameters  import NetworkParameters, ParameterStore
from layernet.topology    import Layer, LayerKind

if TYPE_CHECKING:
    from layernet.network import Network

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1

_kind_names = {
    LayerKind.INPUT       : "input",
    LayerKind.INTERMEDIATE: "intermediate",
    LayerKind.OUTPUT      : "output"
    }

class NeuronRecord(NamedTuple):
    alias:   str | None
    bias:    float
    weights: list[float] | None

class LayerRecord(NamedTuple):
    kind:            LayerKind
    activation_type: ActivationType
    parameters:      dict[str, str]
    neurons:         list[NeuronRecord]

class NetworkRecord(NamedTuple):
    learning_rate: float
    cost:          float
    fitness:       float
    parameters:    dict[str, str]
    layers:        list[LayerRecord]

# ----- network -> document

def network_to_record(network: 'Network') -> NetworkRecord:
    layers = []
    for layer in network.layers:
        neurons = []
        for i in range(layer.size):
            alias   = layer.aliases[i] if layer.aliases is not None else None
            weights = layer.weights[i].tolist() if layer.weights is not None else None
            neurons.append(NeuronRecord(alias, float(layer.biases[i]), weights))
        layers.append(LayerRecord(layer.kind, layer.activation_type, layer.parameters.to_dict(), neurons))

    return NetworkRecord(float(network.learning_rate),
                         float(network.cost),
                         float(network.fitness),
                         network.parameters.to_dict(),
                         layers)

def record_to_document(record: NetworkRecord) -> dict:
    layers = []
    for layer in record.layers:
        neurons = []
        for neuron in layer.neurons:
            neuron_dict = {}
            if neuron.alias is not None:
                neuron_dict["alias"] = neuron.alias
            if layer.kind is not LayerKind.INPUT:
                neuron_dict["bias"]    = neuron.bias
                neuron_dict["weights"] = list(neuron.weights)
            neurons.append(neuron_dict)
        layers.append({
            "kind"      : _kind_names[layer.kind],
            "activation": layer.activation_type.value,
            "parameters": dict(layer.parameters),
            "neurons"   : neurons
        })

    return {
        "format_version": FORMAT_VERSION,
        "learning_rate" : record.learning_rate,
        "cost"          : record.cost,
        "fitness"       : record.fitness,
        "parameters"    : dict(record.parameters),
        "layers"        : layers
    }

# ----- document -> network

def _require(mapping: dict, key: str, context: str):
    if key not in mapping:
        raise SerializationError(f"Missing required field '{key}' in {context}")
    return mapping[key]

def _as_float(value, context: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SerializationError(f"Expected a number for {context}, got {value!r}")
    return float(value)

def _as_mapping(value, context: str) -> dict:
    if not isinstance(value, dict):
        raise SerializationError(f"Expected an object for {context}, got {type(value).__name__}")
    return value

def _as_list(value, context: str) -> list:
    if not isinstance(value, list):
        raise SerializationError(f"Expected a list for {context}, got {type(value).__name__}")
    return value

def _parse_parameters(value, context: str) -> dict[str, str]:
    parameters = _as_mapping(value, context)
    for key, text in parameters.items():
        if not isinstance(text, str):
            raise SerializationError(f"Parameter '{key}' in {context} must be stored as a string")
    return dict(parameters)

def _parse_layer(layer_dict, index: int) -> LayerRecord:
    context = f"layer {index}"
    layer_dict = _as_mapping(layer_dict, context)

    kind_name = _require(layer_dict, "kind", context)
    kind = next((kind for kind, name in _kind_names.items() if name == kind_name), None)
    if kind is None:
        raise SerializationError(f"Unknown layer kind {kind_name!r} in {context}")

    try:
        activation_type = ActivationType.from_name(layer_dict.get("activation", "none"))
    except (ValueError, AttributeError) as e:
        raise SerializationError(f"Invalid activation in {context}: {e}") from e

    parameters = _parse_parameters(layer_dict.get("parameters", {}), f"{context} parameters")

    neurons = []
    for j, neuron_dict in enumerate(_as_list(_require(layer_dict, "neurons", context), f"{context} neurons")):
        neuron_context = f"{context}, neuron {j}"
        neuron_dict = _as_mapping(neuron_dict, neuron_context)

        alias = neuron_dict.get("alias")
        if alias is not None and not isinstance(alias, str):
            raise SerializationError(f"Alias of {neuron_context} must be a string")

        if kind is LayerKind.INPUT:
            neurons.append(NeuronRecord(alias, 0.0, None))
            continue

        bias    = _as_float(_require(neuron_dict, "bias", neuron_context), f"bias of {neuron_context}")
        weights = _as_list(_require(neuron_dict, "weights", neuron_context), f"weights of {neuron_context}")
        weights = [_as_float(w, f"weights of {neuron_context}") for w in weights]
        neurons.append(NeuronRecord(alias, bias, weights))

    if not neurons:
        raise SerializationError(f"{context} has no neurons")

    return LayerRecord(kind, activation_type, parameters, neurons)

def parse_document(document) -> NetworkRecord:
    """
    Validate a persisted document and convert it to a NetworkRecord.

    Parameters:
        document: the dict produced by 'record_to_document()' (or parsed JSON)

    Returns:
        the NetworkRecord

    Raises:
        SerializationError: if a required field is missing or malformed
    """
    document = _as_mapping(document, "network document")

    version = document.get("format_version", FORMAT_VERSION)
    if isinstance(version, bool) or not isinstance(version, int) or version < 1:
        raise SerializationError(f"Invalid format_version {version!r}")
    if version > FORMAT_VERSION:
        logger.debug("Loading a document of format version %d (current %d)", version, FORMAT_VERSION)

    parameters = _parse_parameters(document.get("parameters", {}), "network parameters")

    learning_rate = document.get("learning_rate")
    if learning_rate is None:
        try:
            learning_rate = ParameterStore.from_dict(parameters).get(NetworkParameters.LEARNING_RATE)
        except ValueError as e:
            raise SerializationError(f"Invalid network parameters: {e}") from e
    learning_rate = _as_float(learning_rate, "learning_rate")

    cost    = _as_float(document.get("cost"   , 0.0), "cost")
    fitness = _as_float(document.get("fitness", 0.0), "fitness")

    layer_list = _as_list(_require(document, "layers", "network document"), "layers")
    layers = [_parse_layer(layer_dict, i) for i, layer_dict in enumerate(layer_list)]

    return NetworkRecord(learning_rate, cost, fitness, parameters, layers)

def build_network(record: NetworkRecord, cls=None) -> 'Network':
    """
    Allocate the layers described by a record and link them into a network.

    Parameters:
        record: output of 'parse_document()'
        cls:    the Network class to instantiate (Network if None)

    Returns:
        a linked, consistent network

    Raises:
        SerializationError: if the record does not describe a valid network
    """
    if cls is None:
        # Import here to avoid circular import
        from layernet.network import Network
        cls = Network

    try:
        layers = []
        for layer_record in record.layers:
            aliases = [neuron.alias for neuron in layer_record.neurons]
            if all(alias is None for alias in aliases):
                aliases = None
            elif any(alias is None for alias in aliases):
                raise SerializationError("Either all or none of the neurons of a layer must have an alias")
            elif len({alias.lower() for alias in aliases}) != len(aliases):
                raise SerializationError(f"Duplicate aliases: {aliases}")

            if layer_record.activation_type.is_output_only != (layer_record.kind is LayerKind.OUTPUT) \
                    and layer_record.activation_type is not ActivationType.NONE:
                raise SerializationError(f"Activation '{layer_record.activation_type.value}' cannot be "
                                         f"attached to a layer of kind {layer_record.kind.name}")

            biases = [neuron.bias for neuron in layer_record.neurons]
            if layer_record.kind is LayerKind.INPUT:
                weights = None
            else:
                rows = [neuron.weights for neuron in layer_record.neurons]
                if len({len(row) for row in rows}) != 1:
                    raise SerializationError("The neurons of a layer have weight vectors of different lengths")
                weights = np.array(rows, dtype=np.float64)

            layers.append(Layer(layer_record.kind,
                                biases,
                                weights,
                                layer_record.activation_type,
                                ParameterStore.from_dict(layer_record.parameters),
                                aliases))

        parameters = ParameterStore.from_dict(record.parameters)
        parameters.set(NetworkParameters.LEARNING_RATE, record.learning_rate)
        network = cls._assemble(layers, parameters, record.cost, record.fitness)

    except (ConfigurationError, KeyError, TypeError, ValueError) as e:
        if isinstance(e, SerializationError):
            raise
        raise SerializationError(f"Invalid network document: {e}") from e

    logger.debug("Loaded %r", network)
    return network

# ----- convenience

def dumps(network: 'Network', indent: int | None = None) -> str:
    return json.dumps(record_to_document(network_to_record(network)), indent=indent)

def loads(text: str, cls=None) -> 'Network':
    """
    Rebuild a network from a JSON string.

    Raises:
        SerializationError: if the text is not valid JSON or not a valid network document
    """
    try:
        document = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise SerializationError(f"Invalid JSON: {e}") from e
    return build_network(parse_document(document), cls)

def save(network: 'Network', path: str | Path) -> None:
    path = Path(path)
    path.write_text(dumps(network, indent=2), encoding='utf-8')
    logger.debug("Saved %r to %s", network, path)

def load(path: str | Path, cls=None) -> 'Network':
    """
    Load a network from a JSON file written by 'save()'.

    Raises:
        FileNotFoundError:  if 'path' does not exist
        SerializationError: if the file does not hold a valid network document
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Network file '{path}' not found")
    return loads(path.read_text(encoding='utf-8'), cls)
