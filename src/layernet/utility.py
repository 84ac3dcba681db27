"""
LayerNet Utility Module

Pseudo-random helpers shared by weight initialization and mutation.

The module owns a process-wide numpy Generator. Access to it is serialized by
a lock so that several worker threads may initialize or mutate independent
networks concurrently. Every helper also accepts a caller-owned generator
('rng'), which is used as-is (no locking) and makes results reproducible.

Functions:
    seed(value):                               Reseed the process-wide generator
    uniform(low, high, size=None, rng=None):   Uniform samples in [low, high)
    chance_in(probability, size=None, rng=None): Boolean samples, True with 'probability'
    index_of_max(values):                      Index and value of the largest element
"""

import threading
import numpy as np

_lock = threading.Lock()
_shared_rng = np.random.default_rng()

def seed(value: int | None) -> None:
    """
    Reseed the process-wide generator.

    Parameters:
        value: seed passed to numpy.random.default_rng (None for fresh entropy)
    """
    global _shared_rng
    with _lock:
        _shared_rng = np.random.default_rng(value)

def uniform(low: float, high: float, size=None, rng: np.random.Generator | None = None):
    """
    Draw uniform samples in [low, high).

    Parameters:
        low:  lower bound (inclusive)
        high: upper bound (exclusive)
        size: output shape (None for a scalar)
        rng:  caller-owned generator; the shared one is used if None

    Returns:
        a float or an array of shape 'size'
    """
    if rng is not None:
        return rng.uniform(low, high, size)
    with _lock:
        return _shared_rng.uniform(low, high, size)

def chance_in(probability: float, size=None, rng: np.random.Generator | None = None):
    """
    Decide at random whether events occur, each with the given probability.

    Parameters:
        probability: value in [0, 1]
        size:        output shape (None for a single decision)
        rng:         caller-owned generator; the shared one is used if None

    Returns:
        a bool or a boolean array of shape 'size'
    """
    if rng is not None:
        samples = rng.random(size)
    else:
        with _lock:
            samples = _shared_rng.random(size)
    return samples < probability

def index_of_max(values) -> tuple[int, float]:
    """
    Find the largest value, typically the winning class of a classifier output.

    Parameters:
        values: non-empty sequence of numbers

    Returns:
        (index of the largest value, the largest value); the first index wins ties
    """
    values = np.asarray(values, dtype=np.float64)
    if values.size == 0:
        raise ValueError("Cannot take the maximum of an empty sequence")
    index = int(np.argmax(values))
    return index, float(values[index])
