"""
LayerNet Network Configuration Module

This module implements the description of a network topology, built up one
layer at a time before any neuron is allocated. Every structural rule is
checked by the add-layer call that would break it.

Classes:
    LayerKind:            Enumeration of layer kinds (INPUT, INTERMEDIATE, OUTPUT)
    LayerConfiguration:   Description of one layer
    NetworkConfiguration: Ordered layer descriptions plus network hyperparameters
"""

import logging
from enum import Enum
from typing import Any, Iterable

from layernet.activations import ActivationType, create_activation
from layernet.errors      import ConfigurationError
from layernet.parameters  import NetworkParameters, ParameterStore

logger = logging.getLogger(__name__)

class LayerKind(Enum):
    """
    Layers come in three kinds: input, intermediate, output.
    """
    INPUT        = "I"
    INTERMEDIATE = "H"
    OUTPUT       = "O"

class LayerConfiguration:
    """
    Description of a single layer.

    Public Attributes:
        kind:            the LayerKind
        node_count:      number of neurons (> 0)
        activation_type: ActivationType attached to the layer
        parameters:      ParameterStore read by the activation function
        aliases:         neuron aliases (None if the neurons are addressed by position)
    """

    def __init__(self,
                 kind           : LayerKind,
                 node_count     : int,
                 activation_type: ActivationType,
                 parameters     : ParameterStore,
                 aliases        : list[str] | None = None):
        self.kind            = kind
        self.node_count      = node_count
        self.activation_type = activation_type
        self.parameters      = parameters
        self.aliases         = aliases

    def __repr__(self):
        return (f"LayerConfiguration(kind={self.kind.name}, node_count={self.node_count}, "
                f"activation_type={self.activation_type.name}, aliases={self.aliases})")

class NetworkConfiguration:
    """
    The topology of a network and its hyperparameters.

    Exactly one input layer must be added first and exactly one output layer
    last; any number of intermediate layers may be added in between.

    Public Properties:
        layers:        the layer descriptions, in order
        parameters:    ParameterStore of network hyperparameters
        learning_rate: shortcut for the 'LearningRate' hyperparameter

    Public Methods:
        add_input_layer(...):        Describe the input layer
        add_intermediate_layer(...): Describe an intermediate layer
        add_output_layer(...):       Describe the output layer
        validate():                  Check that the configuration is complete
    """

    def __init__(self, learning_rate: float | None = None, parameters: ParameterStore | None = None):
        self._layers: list[LayerConfiguration] = []
        self.parameters = parameters.copy() if parameters is not None else ParameterStore()
        if learning_rate is not None:
            self.learning_rate = learning_rate

    @property
    def layers(self) -> list[LayerConfiguration]:
        return list(self._layers)

    @property
    def learning_rate(self) -> float:
        return self.parameters.get(NetworkParameters.LEARNING_RATE)

    @learning_rate.setter
    def learning_rate(self, value: float):
        self.parameters.set(NetworkParameters.LEARNING_RATE, value)

    def _has_kind(self, kind: LayerKind) -> bool:
        return any(layer.kind is kind for layer in self._layers)

    @staticmethod
    def _resolve_aliases(node_count: int | None, aliases: Iterable[str] | None) -> tuple[int, list[str] | None]:
        """
        Reconcile the node count with the alias list.

        Returns:
            (node count, list of aliases or None)
        """
        if aliases is not None:
            aliases = list(aliases)
            for alias in aliases:
                if not isinstance(alias, str) or not alias.strip():
                    raise ConfigurationError(f"Invalid alias {alias!r}: aliases must be non-empty strings")

            if node_count is None:
                node_count = len(aliases)
            elif node_count != len(aliases):
                raise ConfigurationError(f"The layer declares {len(aliases)} aliases "
                                         f"but {node_count} nodes")

            lowered = [alias.lower() for alias in aliases]
            duplicates = sorted({alias for alias in lowered if lowered.count(alias) > 1})
            if duplicates:
                raise ConfigurationError(f"Duplicate aliases in layer: {', '.join(duplicates)}")

        if node_count is None:
            raise ConfigurationError("Either a node count or a list of aliases is required")
        if isinstance(node_count, bool) or not isinstance(node_count, int) or node_count <= 0:
            raise ConfigurationError(f"A layer needs a positive number of nodes, got {node_count!r}")
        return node_count, aliases

    @staticmethod
    def _resolve_parameters(parameters: ParameterStore | dict[str, Any] | None) -> ParameterStore:
        if parameters is None:
            return ParameterStore()
        if isinstance(parameters, ParameterStore):
            return parameters.copy()
        try:
            return ParameterStore(parameters)
        except (KeyError, ValueError) as e:
            raise ConfigurationError(f"Invalid layer parameters: {e}") from e

    def _add_layer(self,
                   kind           : LayerKind,
                   node_count     : int | None,
                   activation_type: ActivationType | str,
                   parameters     : ParameterStore | dict[str, Any] | None,
                   aliases        : Iterable[str] | None) -> LayerConfiguration:

        if kind is LayerKind.INPUT and self._has_kind(LayerKind.INPUT):
            raise ConfigurationError("The network already has an input layer")
        if kind is LayerKind.OUTPUT and self._has_kind(LayerKind.OUTPUT):
            raise ConfigurationError("The network already has an output layer")
        if kind is not LayerKind.INPUT and not self._has_kind(LayerKind.INPUT):
            raise ConfigurationError("The input layer must be added first")
        if kind is not LayerKind.OUTPUT and self._has_kind(LayerKind.OUTPUT):
            raise ConfigurationError("No layer can follow the output layer")
        if kind is LayerKind.INTERMEDIATE and aliases is not None:
            raise ConfigurationError("Intermediate layers cannot have aliases")

        try:
            activation_type = ActivationType.from_name(activation_type)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        # The output activation is a post-processing pass over the whole output vector
        if kind is LayerKind.OUTPUT:
            if activation_type is not ActivationType.NONE and not activation_type.is_output_only:
                raise ConfigurationError(f"Activation '{activation_type.value}' cannot be attached "
                                         f"to the output layer")
        elif activation_type.is_output_only:
            raise ConfigurationError(f"Activation '{activation_type.value}' can only be attached "
                                     f"to the output layer")

        node_count, aliases = NetworkConfiguration._resolve_aliases(node_count, aliases)
        parameters = NetworkConfiguration._resolve_parameters(parameters)

        # Bind the activation once, so that invalid parameter values fail now
        try:
            create_activation(activation_type, parameters)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid parameters for activation "
                                     f"'{activation_type.value}': {e}") from e

        layer = LayerConfiguration(kind, node_count, activation_type, parameters, aliases)
        self._layers.append(layer)
        logger.debug("Added %s", layer)
        return layer

    def add_input_layer(self,
                        node_count     : int | None                 = None,
                        activation_type: ActivationType | str       = ActivationType.NONE,
                        parameters     : ParameterStore | dict | None = None,
                        aliases        : Iterable[str] | None       = None) -> LayerConfiguration:
        """
        Describe the input layer.

        Parameters:
            node_count:      number of input neurons (may be omitted if 'aliases' is given)
            activation_type: activation applied to the weighted sums of the next layer
            parameters:      activation parameters (ParameterStore or key/value mapping)
            aliases:         names of the input neurons, for named forward/train calls

        Returns:
            the new LayerConfiguration

        Raises:
            ConfigurationError: if an input layer exists, the aliases do not fit the
                                node count or are not unique, or the activation is
                                output-only
        """
        return self._add_layer(LayerKind.INPUT, node_count, activation_type, parameters, aliases)

    def add_intermediate_layer(self,
                               node_count     : int,
                               activation_type: ActivationType | str       = ActivationType.NONE,
                               parameters     : ParameterStore | dict | None = None,
                               aliases        : Iterable[str] | None       = None) -> LayerConfiguration:
        """
        Describe an intermediate layer. Aliases are not permitted.

        Raises:
            ConfigurationError: if the layer is misplaced, has aliases or an output-only activation
        """
        return self._add_layer(LayerKind.INTERMEDIATE, node_count, activation_type, parameters, aliases)

    def add_output_layer(self,
                         node_count     : int | None                 = None,
                         activation_type: ActivationType | str       = ActivationType.NONE,
                         parameters     : ParameterStore | dict | None = None,
                         aliases        : Iterable[str] | None       = None) -> LayerConfiguration:
        """
        Describe the output layer.

        The activation of the output layer, if any, must be output-only
        (e.g. SOFTMAX); it normalizes the whole output vector after the last
        transition.

        Raises:
            ConfigurationError: if an output layer exists, there is no input layer,
                                the aliases do not fit the node count or are not
                                unique, or the activation is not output-only
        """
        return self._add_layer(LayerKind.OUTPUT, node_count, activation_type, parameters, aliases)

    def validate(self) -> None:
        """
        Check that the configuration describes a complete network.

        Raises:
            ConfigurationError: if the input or the output layer is missing
        """
        if not self._has_kind(LayerKind.INPUT):
            raise ConfigurationError("The network has no input layer")
        if not self._has_kind(LayerKind.OUTPUT):
            raise ConfigurationError("The network has no output layer")
