"""Pytest configuration and shared fixtures."""

import pytest
import sys
import numpy as np
from pathlib import Path

# Add the source directory to the Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))


@pytest.fixture
def rng():
    """Seeded generator, so that random weights are reproducible."""
    return np.random.default_rng(12345)


@pytest.fixture
def small_configuration():
    """A 2-3-2 configuration with named inputs and outputs."""
    from layernet import NetworkConfiguration, ActivationType

    configuration = NetworkConfiguration(learning_rate=0.1)
    configuration.add_input_layer(activation_type=ActivationType.TANH, aliases=["x", "y"])
    configuration.add_intermediate_layer(3, ActivationType.SIGMOID)
    configuration.add_output_layer(aliases=["left", "right"])
    return configuration


@pytest.fixture
def small_network(small_configuration, rng):
    """A 2-3-2 network with seeded random weights."""
    from layernet import Network
    return Network(small_configuration, rng)


@pytest.fixture
def network_2_2_1():
    """
    A 2-2-1 network with fixed weights: linear into the intermediate layer,
    sigmoid from the intermediate layer into the output.
    """
    from layernet import NetworkConfiguration, Network, ActivationType

    configuration = NetworkConfiguration(learning_rate=0.1)
    configuration.add_input_layer(2)
    configuration.add_intermediate_layer(2, ActivationType.SIGMOID)
    configuration.add_output_layer(1)
    network = Network(configuration, np.random.default_rng(0))

    network.layers[1].weights[:] = [[0.15, 0.20], [0.25, 0.30]]
    network.layers[1].biases[:]  = [0.35, 0.35]
    network.layers[2].weights[:] = [[0.40, 0.45]]
    network.layers[2].biases[:]  = [0.60]
    return network
