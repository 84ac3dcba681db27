"""
LayerNet - layered feed-forward neural networks in numpy.

This package implements fully-connected feed-forward networks built layer by
layer, trained one sample at a time by backpropagation, evolved by cloning and
mutating their weights, and persisted as JSON documents.

Main components:
- parameters:  Typed key/value configuration of activations and hyperparameters
- activations: Activation functions and their derivatives
- topology:    Network configuration, layers and neurons
- engine:      Forward pass and backpropagation
- network:     The Network class and named input/output values
- evolution:   Cloning and mutation
- persistence: JSON serialization
- run:         INI file configuration

Example:
    >>> from layernet import NetworkConfiguration, Network, ActivationType
    >>> configuration = NetworkConfiguration(learning_rate=0.1)
    >>> configuration.add_input_layer(2, ActivationType.SIGMOID)
    >>> configuration.add_intermediate_layer(3, ActivationType.SIGMOID)
    >>> configuration.add_output_layer(1)
    >>> network = Network(configuration)
    >>> cost = network.train([0.0, 1.0], [1.0])
"""

__version__ = "0.1.0"

# Import main classes for convenient access
from layernet.errors      import LayerNetError, ConfigurationError, ShapeError, SerializationError
from layernet.parameters  import Range, NamedParameter, ParameterStore, LayerParameters, NetworkParameters
from layernet.activations import ActivationType, ActivationFunction
from layernet.topology    import LayerKind, NetworkConfiguration, Layer, Neuron
from layernet.network     import Network, NamedValues
from layernet.run.config  import Config

__all__ = [
    "LayerNetError",
    "ConfigurationError",
    "ShapeError",
    "SerializationError",
    "Range",
    "NamedParameter",
    "ParameterStore",
    "LayerParameters",
    "NetworkParameters",
    "ActivationType",
    "ActivationFunction",
    "LayerKind",
    "NetworkConfiguration",
    "Layer",
    "Neuron",
    "Network",
    "NamedValues",
    "Config",
]
