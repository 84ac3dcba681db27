"""
LayerNet Topology Package

This package implements the structure of a layered network: the configuration
describing it and the layers holding its neurons.

Modules:
    configuration: LayerKind enumeration, LayerConfiguration and NetworkConfiguration classes
    layer:         Layer and Neuron classes

Exported Classes:
    LayerKind:            Enumeration of layer kinds (INPUT, INTERMEDIATE, OUTPUT)
    LayerConfiguration:   Description of one layer
    NetworkConfiguration: Ordered layer descriptions plus network hyperparameters
    Layer:                A group of neurons stored as arrays
    Neuron:               View of a single neuron
"""

from layernet.topology.configuration import LayerKind, LayerConfiguration, NetworkConfiguration
from layernet.topology.layer         import Layer, Neuron

__all__ = ['LayerKind',
           'LayerConfiguration',
           'NetworkConfiguration',
           'Layer',
           'Neuron']
