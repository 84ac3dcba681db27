"""
LayerNet Activation Function Module

This module implements the activation functions attached to network layers.

Every variant is a member of the closed ActivationType enumeration; a single
ActivationFunction class binds a variant to the parameters it reads from a
ParameterStore and dispatches to the element-wise kernels of
'basic_activations'.

Classes:
    ActivationType:     Enumeration of the supported activation variants
    ActivationFunction: An activation variant bound to its parameters

Functions:
    create_activation(activation_type, parameters): Build the ActivationFunction of a layer
"""

from enum import Enum
import numpy as np

from layernet.activations.basic_activations import activations, derivatives, activation_codes
from layernet.parameters import LayerParameters, ParameterStore, Range

class ActivationType(Enum):
    NONE             = "none"
    IDENTITY         = "identity"
    LINEAR           = "linear"
    PIECEWISE_LINEAR = "piecewise_linear"
    RELU             = "relu"
    LEAKY_RELU       = "leaky_relu"
    SIGMOID          = "sigmoid"
    TANH             = "tanh"
    SOFTMAX          = "softmax"
    SIMPLE_SOFTMAX   = "simple_softmax"
    ELU              = "elu"
    SELU             = "selu"
    SOFTPLUS         = "softplus"
    SOFTSIGN         = "softsign"
    SWISH            = "swish"
    MISH             = "mish"
    GAUSSIAN         = "gaussian"
    HARD_SIGMOID     = "hard_sigmoid"
    HARD_TANH        = "hard_tanh"

    @property
    def is_output_only(self) -> bool:
        """Variants that normalize the whole output vector at once."""
        return self in (ActivationType.SOFTMAX, ActivationType.SIMPLE_SOFTMAX)

    @property
    def code(self) -> str:
        return activation_codes[self.value]

    @classmethod
    def from_name(cls, name: 'str | ActivationType') -> 'ActivationType':
        """
        Look up a variant by name, ignoring letter case, dashes and underscores.

        Raises:
            ValueError: if 'name' matches no variant
        """
        if isinstance(name, ActivationType):
            return name
        normalized = name.strip().lower().replace('-', '').replace('_', '')
        for member in cls:
            if member.value.replace('_', '') == normalized:
                return member
        raise ValueError(f"Unknown activation function '{name}'")

# Keyword arguments of each kernel and the parameter each one is read from.
_bound_parameters = {
    ActivationType.LINEAR          : {'alpha': LayerParameters.LINEAR_ALPHA,
                                      'bounds': LayerParameters.LINEAR_RANGE},
    ActivationType.PIECEWISE_LINEAR: {'alpha': LayerParameters.PIECEWISE_LINEAR_ALPHA,
                                      'bounds': LayerParameters.PIECEWISE_LINEAR_RANGE},
    ActivationType.LEAKY_RELU      : {'alpha': LayerParameters.LEAKY_RELU_ALPHA},
    ActivationType.ELU             : {'alpha': LayerParameters.ELU_ALPHA},
    ActivationType.SELU            : {'alpha': LayerParameters.SELU_ALPHA,
                                      'scale': LayerParameters.SELU_LAMBDA},
    ActivationType.SOFTMAX         : {'temperature': LayerParameters.SOFTMAX_TEMPERATURE},
    }

class ActivationFunction:
    """
    An activation variant together with the parameter values it was built with.

    Parameters are read once, at construction; later changes to the store
    only take effect on a newly created ActivationFunction.

    Public Attributes:
        activation_type: the ActivationType variant
        arguments:       keyword arguments passed to the kernels (e.g. {'alpha': 0.01})

    Public Methods:
        activate(z):                       Activation of a vector of weighted sums
        derivative(z):                     Derivative at pre-activation value(s)
        output_gradient(outputs, expected): Loss gradient w.r.t. the inputs of an output-only variant
    """

    def __init__(self, activation_type: ActivationType, parameters: ParameterStore | None = None):
        """
        Parameters:
            activation_type: any variant except NONE
            parameters:      store to read the variant's parameters from (defaults apply if None)

        Raises:
            ValueError: if 'activation_type' is NONE, or a parameter holds an invalid value
        """
        if activation_type is ActivationType.NONE:
            raise ValueError("ActivationType.NONE has no activation function")

        parameters = parameters if parameters is not None else ParameterStore()
        self.activation_type = activation_type
        self.arguments = {}
        for name, descriptor in _bound_parameters.get(activation_type, {}).items():
            value = parameters.get(descriptor)
            if isinstance(value, Range):
                if value.min >= value.max:
                    raise ValueError(f"Parameter '{descriptor.key}' has an empty range: {value}")
                value = (value.min, value.max)
            self.arguments[name] = value

        if self.arguments.get('temperature', 1.0) <= 0:
            raise ValueError("SoftMax temperature must be positive")

        self._activation = activations[activation_type.value]
        self._derivative = derivatives[activation_type.value]

    @property
    def is_output_only(self) -> bool:
        return self.activation_type.is_output_only

    def activate(self, z: np.ndarray) -> np.ndarray:
        return np.asarray(self._activation(np.asarray(z, dtype=float), **self.arguments), dtype=float)

    def derivative(self, z):
        """
        Derivative of the activation, evaluated at the pre-activation value(s) 'z'.

        Defined for every real input; NaN and infinite inputs yield 0.

        Parameters:
            z: a scalar or an array of weighted sums

        Returns:
            a float if 'z' is a scalar, otherwise an array of the same shape
        """
        array  = np.asarray(z, dtype=float)
        finite = np.isfinite(array)
        result = np.where(finite, self._derivative(np.where(finite, array, 0.0), **self.arguments), 0.0)
        if result.ndim == 0:
            return float(result)
        return result

    def output_gradient(self, outputs: np.ndarray, expected: np.ndarray) -> np.ndarray:
        """
        Gradient of the cross-entropy loss with respect to the inputs of a
        normalizing output activation: (outputs - expected) / temperature.

        Raises:
            ValueError: if the variant is not output-only
        """
        if not self.is_output_only:
            raise ValueError(f"'{self.activation_type.value}' is not an output activation")
        temperature = self.arguments.get('temperature', 1.0)
        return (np.asarray(outputs, dtype=float) - np.asarray(expected, dtype=float)) / temperature

    def __eq__(self, other):
        if not isinstance(other, ActivationFunction):
            return NotImplemented
        return self.activation_type is other.activation_type and self.arguments == other.arguments

    def __repr__(self):
        if self.arguments:
            arguments = ", ".join(f"{key}={value}" for key, value in self.arguments.items())
            return f"ActivationFunction({self.activation_type.name}, {arguments})"
        return f"ActivationFunction({self.activation_type.name})"

def create_activation(activation_type: ActivationType,
                      parameters:      ParameterStore | None = None) -> ActivationFunction | None:
    """Build the activation function of a layer; None for ActivationType.NONE."""
    if activation_type is ActivationType.NONE:
        return None
    return ActivationFunction(activation_type, parameters)
