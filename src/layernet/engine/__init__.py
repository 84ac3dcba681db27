"""
LayerNet Engine Package

This package implements the numeric core: forward inference and
backpropagation training over a list of layers.

Modules:
    forward:         BatchNormState class, forward_pass, weighted_sums and batch_normalize functions
    backpropagation: LayerGradient class, compute_gradients and apply_gradients functions
"""

from layernet.engine.forward         import BatchNormState, forward_pass, weighted_sums, batch_normalize
from layernet.engine.backpropagation import LayerGradient, compute_gradients, apply_gradients

__all__ = ['BatchNormState',
           'forward_pass',
           'weighted_sums',
           'batch_normalize',
           'LayerGradient',
           'compute_gradients',
           'apply_gradients']
