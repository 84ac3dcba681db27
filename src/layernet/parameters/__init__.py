"""
LayerNet Parameters Package

This package implements the typed key/value configuration shared by activation
functions (e.g. the Leaky ReLU slope) and network hyperparameters (e.g. the
learning rate, weight decay and gradient clipping).

Modules:
    named_parameter: Range and NamedParameter classes
    keys:            Registered parameter descriptors
    parameter_store: ParameterStore class

Exported Classes:
    Range:             Numeric (min, max) pair with a compact string form
    NamedParameter:    Descriptor of a parameter (key, type, default)
    LayerParameters:   Descriptors read by activation functions
    NetworkParameters: Descriptors of network hyperparameters
    ParameterStore:    Case-insensitive typed parameter map
"""

from layernet.parameters.named_parameter import Range, NamedParameter
from layernet.parameters.keys            import LayerParameters, NetworkParameters, find_parameter
from layernet.parameters.parameter_store import ParameterStore

__all__ = ['Range',
           'NamedParameter',
           'LayerParameters',
           'NetworkParameters',
           'find_parameter',
           'ParameterStore']
