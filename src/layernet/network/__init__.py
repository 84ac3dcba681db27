"""
LayerNet Network Package

Modules:
    network:      Network class
    named_values: NamedValues class

Exported Classes:
    Network:     Layered dense network
    NamedValues: Case-insensitive alias-keyed values for named inputs and outputs
"""

from layernet.network.named_values import NamedValues
from layernet.network.network      import Network

__all__ = ['Network', 'NamedValues']
