"""
Shared fixtures for integration tests.
"""

import pytest
import numpy as np

from layernet import utility


@pytest.fixture(autouse=True)
def set_random_seeds():
    """Seed the shared generator, so that networks built without 'rng' are reproducible."""
    utility.seed(42)
    yield


@pytest.fixture
def xor_data():
    """The four XOR samples."""
    inputs  = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])
    outputs = np.array([[0.0], [1.0], [1.0], [0.0]])
    return inputs, outputs
