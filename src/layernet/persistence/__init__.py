"""
LayerNet Persistence Package

Modules:
    serializer: JSON (de)serialization of networks
"""

from layernet.persistence.serializer import (
    NeuronRecord,
    LayerRecord,
    NetworkRecord,
    network_to_record,
    record_to_document,
    parse_document,
    build_network,
    dumps,
    loads,
    save,
    load
)

__all__ = ['NeuronRecord',
           'LayerRecord',
           'NetworkRecord',
           'network_to_record',
           'record_to_document',
           'parse_document',
           'build_network',
           'dumps',
           'loads',
           'save',
           'load']
