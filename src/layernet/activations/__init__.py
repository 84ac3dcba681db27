"""
Activations Package

This package provides the activation functions attached to network layers.

Exported:
    activations:        Dictionary mapping activation names to element-wise kernels
    derivatives:        Dictionary mapping activation names to derivative kernels
    activation_codes:   Dictionary mapping activation names to 3-letter identifiers
    ActivationType:     Enumeration of the supported activation variants
    ActivationFunction: An activation variant bound to its parameters
    create_activation:  Build the activation function of a layer
"""

from layernet.activations.basic_activations import (
    activations,
    derivatives,
    activation_codes
)
from layernet.activations.activation_function import (
    ActivationType,
    ActivationFunction,
    create_activation
)

__all__ = [
    'activations',
    'derivatives',
    'activation_codes',
    'ActivationType',
    'ActivationFunction',
    'create_activation'
]
