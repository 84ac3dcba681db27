"""
LayerNet Evolution Package

This package provides the genetic operators used by neuro-evolution: cloning
a network and mutating its weights and biases.

Modules:
    genetics: clone, mutate_in_place and mutate_new functions
"""

from layernet.evolution.genetics import clone, mutate_in_place, mutate_new

__all__ = ['clone', 'mutate_in_place', 'mutate_new']
