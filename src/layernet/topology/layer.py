"""
LayerNet Layer Module

This module implements the layers of a network and a lightweight view of the
individual neurons they contain.

A layer keeps the state of its neurons in arrays: row j of the weight matrix
holds the incoming weights of neuron j, one column per neuron of the previous
layer. Input layers have no weights.

Classes:
    Layer:  A group of neurons of one kind, stored as arrays
    Neuron: View of a single neuron of a layer
"""

import weakref
import numpy as np

from layernet                      import utility
from layernet.activations          import ActivationType, ActivationFunction, create_activation
from layernet.errors               import ConfigurationError
from layernet.parameters           import ParameterStore
from layernet.topology.configuration import LayerConfiguration, LayerKind

# Initial weights and biases are drawn uniformly from [-INIT_RANGE, INIT_RANGE).
INIT_RANGE = 1.0

class Layer:
    """
    A layer of neurons.

    The network that owns a layer and the layer's position within it are
    assigned by the network ('_link()'); a layer never creates them itself.

    Public Attributes:
        kind:            LayerKind of the layer
        activation_type: ActivationType governing the transition into the next layer
                         (for the output layer: the normalization of the output vector)
        parameters:      ParameterStore the activation function was built from
        activation:      the ActivationFunction (None for ActivationType.NONE)
        aliases:         neuron aliases, or None
        weights:         incoming weights, shape (size, previous size); None for the input layer
        biases:          neuron biases, shape (size,)
        values:          neuron values of the last forward pass, shape (size,)
        sums:            weighted sums (plus bias, batch-normalized if enabled) of the last
                         forward pass, shape (size,)
        batch_norm:      BatchNormState of the last forward pass, or None

    Public Properties:
        size:     number of neurons
        neurons:  list of Neuron views
        network:  the owning network (None before linking)
        position: index of the layer within the network
        previous: the preceding layer (None for the input layer)
    """

    def __init__(self,
                 kind           : LayerKind,
                 biases         : np.ndarray,
                 weights        : np.ndarray | None,
                 activation_type: ActivationType   = ActivationType.NONE,
                 parameters     : ParameterStore | None = None,
                 aliases        : list[str] | None = None):
        biases = np.array(biases, dtype=np.float64)
        if biases.ndim != 1 or biases.size == 0:
            raise ConfigurationError("A layer needs a non-empty vector of biases")
        if kind is LayerKind.INPUT:
            if weights is not None:
                raise ConfigurationError("The input layer has no weights")
        else:
            weights = np.array(weights, dtype=np.float64)
            if weights.ndim != 2 or weights.shape[0] != biases.size:
                raise ConfigurationError(f"Weight matrix of shape {weights.shape} does not "
                                         f"fit {biases.size} neurons")
        if aliases is not None and len(aliases) != biases.size:
            raise ConfigurationError(f"{len(aliases)} aliases for {biases.size} neurons")

        self.kind            = kind
        self.activation_type = activation_type
        self.parameters      = parameters if parameters is not None else ParameterStore()
        self.activation: ActivationFunction | None = create_activation(activation_type, self.parameters)
        self.aliases         = list(aliases) if aliases is not None else None
        self.weights         = weights
        self.biases          = biases
        self.values          = np.zeros(biases.size)
        self.sums            = np.zeros(biases.size)
        self.batch_norm      = None

        self._alias_index = {alias.lower(): i for i, alias in enumerate(self.aliases or [])}
        self._network     = None
        self._position    = None

    @classmethod
    def from_configuration(cls,
                           configuration: LayerConfiguration,
                           previous_size: int | None,
                           rng          : np.random.Generator | None = None) -> 'Layer':
        """
        Allocate a layer with random weights and biases.

        Parameters:
            configuration: the layer description
            previous_size: number of neurons of the previous layer (None for the input layer)
            rng:           caller-owned generator; the shared one is used if None

        Returns:
            the new (not yet linked) layer
        """
        size = configuration.node_count
        if configuration.kind is LayerKind.INPUT:
            weights = None
            biases  = np.zeros(size)
        else:
            weights = utility.uniform(-INIT_RANGE, INIT_RANGE, (size, previous_size), rng)
            biases  = utility.uniform(-INIT_RANGE, INIT_RANGE, size, rng)

        return cls(configuration.kind,
                   biases,
                   weights,
                   configuration.activation_type,
                   configuration.parameters.copy(),
                   configuration.aliases)

    def _link(self, network, position: int) -> None:
        self._network  = weakref.ref(network)
        self._position = position

    @property
    def network(self):
        return self._network() if self._network is not None else None

    @property
    def position(self) -> int | None:
        return self._position

    @property
    def previous(self) -> 'Layer | None':
        network = self.network
        if network is None or self._position == 0:
            return None
        return network.layers[self._position - 1]

    @property
    def size(self) -> int:
        return self.biases.size

    @property
    def neurons(self) -> list['Neuron']:
        return [Neuron(self, i) for i in range(self.size)]

    def index_of(self, alias: str) -> int:
        """
        Position of the neuron carrying 'alias' (case-insensitive).

        Raises:
            KeyError: if no neuron carries 'alias'
        """
        return self._alias_index[alias.lower()]

    def copy(self) -> 'Layer':
        """Independent copy of the layer (unlinked)."""
        clone = Layer(self.kind,
                      self.biases.copy(),
                      None if self.weights is None else self.weights.copy(),
                      self.activation_type,
                      self.parameters.copy(),
                      self.aliases)
        clone.values[:] = self.values
        clone.sums[:]   = self.sums
        return clone

    def __len__(self):
        return self.size

    def __getitem__(self, index: int) -> 'Neuron':
        if not -self.size <= index < self.size:
            raise IndexError(f"Neuron index {index} out of range for a layer of {self.size}")
        return Neuron(self, index % self.size)

    def __iter__(self):
        return iter(self.neurons)

    def __str__(self):
        code = self.activation_type.code
        return f"{self.kind.name:<12} {self.size:>4} neurons  [{code}]"

class Neuron:
    """
    A single neuron, viewed through the arrays of its layer.

    Reading or writing through a Neuron reads or writes the layer's arrays.

    Public Properties:
        layer:   the layer containing the neuron
        index:   position of the neuron within the layer
        value:   value of the last forward pass
        bias:    bias
        weights: incoming weights (a view into the layer's weight matrix; None for input neurons)
        alias:   alias, or None
    """

    def __init__(self, layer: Layer, index: int):
        self._layer = layer
        self._index = index

    @property
    def layer(self) -> Layer:
        return self._layer

    @property
    def index(self) -> int:
        return self._index

    @property
    def value(self) -> float:
        return float(self._layer.values[self._index])

    @value.setter
    def value(self, value: float):
        self._layer.values[self._index] = value

    @property
    def bias(self) -> float:
        return float(self._layer.biases[self._index])

    @bias.setter
    def bias(self, value: float):
        self._layer.biases[self._index] = value

    @property
    def weights(self) -> np.ndarray | None:
        if self._layer.weights is None:
            return None
        return self._layer.weights[self._index]

    @property
    def alias(self) -> str | None:
        if self._layer.aliases is None:
            return None
        return self._layer.aliases[self._index]

    def __eq__(self, other):
        if not isinstance(other, Neuron):
            return NotImplemented
        return self._layer is other._layer and self._index == other._index

    def __hash__(self):
        return hash((id(self._layer), self._index))

    def __repr__(self):
        alias = f", alias={self.alias!r}" if self.alias is not None else ""
        return f"Neuron(index={self._index}, value={self.value:+.4f}, bias={self.bias:+.4f}{alias})"
