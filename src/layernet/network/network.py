"""
LayerNet Network Module

This module implements the Network class, a fully-connected feed-forward
network made of an ordered list of layers.

Classes:
    Network: Layered dense network with forward inference, backpropagation
             training, genetic operators and persistence
"""

import logging
import numpy as np
from pathlib import Path

from layernet.engine      import LayerGradient, forward_pass, compute_gradients, apply_gradients
from layernet.errors      import ConfigurationError, ShapeError
from layernet.evolution   import genetics
from layernet.parameters  import NetworkParameters, ParameterStore
from layernet.persistence import serializer
from layernet.topology    import Layer, LayerKind, NetworkConfiguration
from layernet.network.named_values import NamedValues

logger = logging.getLogger(__name__)

class Network:
    """
    A fully-connected feed-forward neural network.

    The network exclusively owns its layers. Each layer knows its position in
    the network and refers back to it; these back-references are assigned
    whenever a network is assembled (construction, cloning, loading).

    Public Attributes:
        parameters: ParameterStore of hyperparameters (learning rate, weight decay, ...)
        cost:       loss of the most recent training step (diagnostic only)
        fitness:    score assigned by a genetic algorithm (never read by the network)

    Public Properties:
        layers:        the layers, input layer first
        input_layer:   the first layer
        output_layer:  the last layer
        learning_rate: the 'LearningRate' hyperparameter

    Public Methods:
        forward(inputs):                     Output vector for an input vector
        forward_named(inputs):               Output NamedValues for input NamedValues
        train(inputs, expected):             One backpropagation step, returns the cost
        train_named(inputs, expected):       Same, with NamedValues
        compute_gradients(inputs, expected): Cost and gradients, without updating anything
        clone():                             Independent deep copy
        mutate_in_place(probability, severity): Perturb this network's weights and biases
        mutate_new(probability, severity):   Mutated clone; this network is unchanged
        to_dict() / from_dict(data):         Conversion to/from the persisted document
        dumps() / loads(text):               Conversion to/from a JSON string
        save(path) / load(path):             JSON file persistence
        visualize(...):                      Render the topology with graphviz
    """

    def __init__(self, configuration: NetworkConfiguration, rng: np.random.Generator | None = None):
        """
        Allocate a network with random weights and biases.

        Parameters:
            configuration: the topology and hyperparameters
            rng:           caller-owned generator; the shared one is used if None

        Raises:
            ConfigurationError: if the configuration is incomplete
        """
        configuration.validate()

        layers: list[Layer] = []
        previous_size = None
        for layer_configuration in configuration.layers:
            layers.append(Layer.from_configuration(layer_configuration, previous_size, rng))
            previous_size = layer_configuration.node_count

        self._assign(layers, configuration.parameters.copy())
        logger.debug("Created network %s", self._shape())

    @classmethod
    def _assemble(cls,
                  layers    : list[Layer],
                  parameters: ParameterStore,
                  cost      : float = 0.0,
                  fitness   : float = 0.0) -> 'Network':
        """
        Build a network around existing layers (used by cloning and loading).

        Raises:
            ConfigurationError: if the layers do not form a valid network
        """
        network = cls.__new__(cls)
        network._assign(layers, parameters)
        network.cost    = cost
        network.fitness = fitness
        return network

    def _assign(self, layers: list[Layer], parameters: ParameterStore) -> None:
        Network._check_structure(layers)
        self._layers    = layers
        self.parameters = parameters
        self.cost       = 0.0
        self.fitness    = 0.0
        self._link()

    @staticmethod
    def _check_structure(layers: list[Layer]) -> None:
        if len(layers) < 2:
            raise ConfigurationError("A network needs at least an input and an output layer")
        if layers[0].kind is not LayerKind.INPUT:
            raise ConfigurationError("The first layer must be the input layer")
        if layers[-1].kind is not LayerKind.OUTPUT:
            raise ConfigurationError("The last layer must be the output layer")
        for layer in layers[1:-1]:
            if layer.kind is not LayerKind.INTERMEDIATE:
                raise ConfigurationError(f"Layer of kind {layer.kind.name} between input and output")
            if layer.aliases is not None:
                raise ConfigurationError("Intermediate layers cannot have aliases")
        for previous, layer in zip(layers[:-1], layers[1:]):
            if layer.weights.shape[1] != previous.size:
                raise ConfigurationError(f"Weight matrix of shape {layer.weights.shape} does not "
                                         f"follow a layer of {previous.size} neurons")

    def _link(self) -> None:
        for position, layer in enumerate(self._layers):
            layer._link(self, position)

    def _shape(self) -> str:
        return "-".join(str(layer.size) for layer in self._layers)

    @property
    def layers(self) -> list[Layer]:
        return self._layers

    @property
    def input_layer(self) -> Layer:
        return self._layers[0]

    @property
    def output_layer(self) -> Layer:
        return self._layers[-1]

    @property
    def learning_rate(self) -> float:
        return self.parameters.get(NetworkParameters.LEARNING_RATE)

    @learning_rate.setter
    def learning_rate(self, value: float):
        self.parameters.set(NetworkParameters.LEARNING_RATE, value)

    # ----- inference

    def forward(self, inputs) -> np.ndarray:
        """
        Compute the output for an input vector.

        Parameters:
            inputs: one value per input neuron

        Returns:
            one value per output neuron

        Raises:
            ShapeError: if 'inputs' does not have one value per input neuron
        """
        return forward_pass(self._layers, inputs)

    def _vector_from_named(self, layer: Layer, values, role: str) -> np.ndarray:
        if layer.aliases is None:
            raise ShapeError(f"The {role} neurons have no aliases")
        if not isinstance(values, NamedValues):
            values = NamedValues(values)

        for key in values.keys():
            try:
                layer.index_of(key)
            except KeyError:
                raise ShapeError(f"Unknown {role} alias '{key}'") from None

        vector = np.empty(layer.size)
        for i, alias in enumerate(layer.aliases):
            if alias not in values:
                raise ShapeError(f"No value given for {role} alias '{alias}'")
            vector[i] = values.get(alias)
        return vector

    def forward_named(self, inputs) -> NamedValues:
        """
        Compute the output for values keyed by input alias.

        Parameters:
            inputs: NamedValues or mapping holding one value per input alias

        Returns:
            NamedValues holding one value per output alias

        Raises:
            ShapeError: if the input or output neurons have no aliases, an input
                        alias has no value, or a key matches no input alias
        """
        if self.output_layer.aliases is None:
            raise ShapeError("The output neurons have no aliases")
        vector  = self._vector_from_named(self.input_layer, inputs, "input")
        outputs = self.forward(vector)
        return NamedValues(zip(self.output_layer.aliases, outputs))

    # ----- training

    def compute_gradients(self, inputs, expected) -> tuple[float, list[LayerGradient | None]]:
        """
        Cost and per-layer gradients for one sample, without updating the network.
        """
        return compute_gradients(self._layers, inputs, expected)

    def train(self, inputs, expected) -> float:
        """
        Perform one backpropagation step on a single sample.

        The weights and biases are updated in place using the learning rate,
        weight decay and gradient clipping hyperparameters.

        Parameters:
            inputs:   one value per input neuron
            expected: one value per output neuron

        Returns:
            the cost 0.5 * sum((output - expected)^2), measured before the update
            (also stored in 'cost')

        Raises:
            ConfigurationError: if the learning rate is not positive
            ShapeError:         if 'inputs' or 'expected' do not fit the network
        """
        learning_rate = self.learning_rate
        if not learning_rate > 0:
            raise ConfigurationError(f"The learning rate must be positive, got {learning_rate}")

        cost, gradients = compute_gradients(self._layers, inputs, expected)
        apply_gradients(self._layers,
                        gradients,
                        learning_rate,
                        self.parameters.get(NetworkParameters.WEIGHT_DECAY),
                        self.parameters.get(NetworkParameters.GRADIENT_CLIP))

        self.cost = cost
        if not np.isfinite(cost):
            logger.warning("Training step produced a non-finite cost (%s)", cost)
        return cost

    def train_named(self, inputs, expected) -> float:
        """
        Perform one backpropagation step on values keyed by alias.

        Raises:
            ShapeError: if the input or output neurons have no aliases, or the
                        keys do not match the aliases
        """
        input_vector    = self._vector_from_named(self.input_layer , inputs  , "input")
        expected_vector = self._vector_from_named(self.output_layer, expected, "output")
        return self.train(input_vector, expected_vector)

    # ----- genetic operators

    def clone(self) -> 'Network':
        return genetics.clone(self)

    def mutate_in_place(self, probability: float, severity: float, rng: np.random.Generator | None = None) -> None:
        """
        Perturb this network's weights and biases; see 'genetics.mutate_in_place'.
        """
        genetics.mutate_in_place(self, probability, severity, rng)

    def mutate_new(self, probability: float, severity: float, rng: np.random.Generator | None = None) -> 'Network':
        return genetics.mutate_new(self, probability, severity, rng)

    # ----- persistence

    def to_dict(self) -> dict:
        return serializer.record_to_document(serializer.network_to_record(self))

    @classmethod
    def from_dict(cls, data: dict) -> 'Network':
        return serializer.build_network(serializer.parse_document(data), cls)

    def dumps(self, indent: int | None = None) -> str:
        return serializer.dumps(self, indent)

    @classmethod
    def loads(cls, text: str) -> 'Network':
        return serializer.loads(text, cls)

    def save(self, path: str | Path) -> None:
        serializer.save(self, path)

    @classmethod
    def load(cls, path: str | Path) -> 'Network':
        return serializer.load(path, cls)

    def visualize(self, filename: str = "network", view: bool = False, **kwargs):
        """Render the topology with graphviz; see 'layernet.visualization.visualize'."""
        # Import here to avoid circular import
        from layernet.visualization import visualize
        return visualize(self, filename, view, **kwargs)

    def __str__(self):
        lines = [f"Network {self._shape()}  learning rate {self.learning_rate}"]
        lines.extend(f"  {layer}" for layer in self._layers)
        return "\n".join(lines)

    def __repr__(self):
        return f"Network({self._shape()})"
