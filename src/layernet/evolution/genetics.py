"""
LayerNet Genetics Module

Genetic operators over whole networks: cloning and weight/bias mutation.
Neither operator ever changes the topology (layer count, neuron count, aliases,
activations).

Functions:
    clone(network):                                    Independent deep copy
    mutate_in_place(network, probability, severity):   Perturb the network's weights and biases
    mutate_new(network, probability, severity):        Mutated clone; the original is unchanged
"""

import logging
import numpy as np
from typing import TYPE_CHECKING

from layernet import utility

if TYPE_CHECKING:
    from layernet.network import Network

logger = logging.getLogger(__name__)

def clone(network: 'Network') -> 'Network':
    """
    Create a structurally identical, fully independent copy of a network.

    The copy has its own layers, arrays and parameter stores; its layers refer
    back to the copy. Learning rate, cost and fitness are copied.
    """
    layers = [layer.copy() for layer in network.layers]
    return type(network)._assemble(layers,
                                   network.parameters.copy(),
                                   network.cost,
                                   network.fitness)

def _check_arguments(probability: float, severity: float) -> None:
    if not 0.0 <= probability <= 1.0:
        raise ValueError(f"Mutation probability must be in [0, 1], got {probability}")
    if not (np.isfinite(severity) and severity >= 0):
        raise ValueError(f"Mutation severity must be finite and non-negative, got {severity}")

def _perturb(values: np.ndarray, probability: float, severity: float, rng) -> int:
    mask  = utility.chance_in(probability, values.shape, rng)
    delta = utility.uniform(-severity, severity, values.shape, rng)
    values[mask] += delta[mask]
    return int(mask.sum())

def mutate_in_place(network    : 'Network',
                    probability: float,
                    severity   : float,
                    rng        : np.random.Generator | None = None) -> None:
    """
    Perturb the weights and biases of a network in place.

    Every weight and every bias (input-layer biases excepted, as they take no
    part in the computation) is independently selected with 'probability';
    a selected value is shifted by a uniform delta in [-severity, severity).

    This modifies 'network'; use 'mutate_new()' to leave it unchanged.

    Parameters:
        network:     the network to modify
        probability: chance that a given value is perturbed, in [0, 1]
        severity:    bound of the perturbation, >= 0
        rng:         caller-owned generator; the shared one is used if None

    Raises:
        ValueError: if 'probability' is outside [0, 1] or 'severity' is negative
    """
    _check_arguments(probability, severity)

    mutated = 0
    for layer in network.layers[1:]:
        mutated += _perturb(layer.weights, probability, severity, rng)
        mutated += _perturb(layer.biases , probability, severity, rng)

    logger.debug("Mutated %d values (probability %s, severity %s)", mutated, probability, severity)

def mutate_new(network    : 'Network',
               probability: float,
               severity   : float,
               rng        : np.random.Generator | None = None) -> 'Network':
    """
    Return a mutated clone of 'network'; 'network' itself is never altered.
    """
    _check_arguments(probability, severity)
    offspring = clone(network)
    mutate_in_place(offspring, probability, severity, rng)
    return offspring
