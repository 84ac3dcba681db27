"""
Integration tests: training and evolving networks on XOR end-to-end.

NOTE: These tests use a fixed random seed (42) for reproducibility. The
assertions only require clear progress, not a solved problem.
"""

import pytest
import numpy as np

from layernet import ActivationType, Config, Network, NetworkConfiguration, NetworkParameters


def total_cost(network, inputs, outputs):
    return sum(0.5 * float(np.sum((network.forward(x) - y) ** 2)) for x, y in zip(inputs, outputs))


@pytest.fixture
def xor_network():
    """A 2-4-1 network: tanh into the intermediate layer, sigmoid into the output."""
    configuration = NetworkConfiguration(learning_rate=0.5)
    configuration.add_input_layer(2, ActivationType.TANH)
    configuration.add_intermediate_layer(4, ActivationType.SIGMOID)
    configuration.add_output_layer(1)
    return Network(configuration)


# ============================================================================
# Test backpropagation end-to-end
# ============================================================================

class TestXORTraining:
    """Train XOR sample by sample."""

    def test_training_reduces_cost(self, xor_network, xor_data):
        """Test that a few hundred epochs reduce the total cost."""
        inputs, outputs = xor_data
        before = total_cost(xor_network, inputs, outputs)
        for _ in range(500):
            for x, y in zip(inputs, outputs):
                xor_network.train(x, y)
        after = total_cost(xor_network, inputs, outputs)
        assert after < before

    def test_save_resume_matches_uninterrupted(self, xor_network, xor_data, tmp_path):
        """Test that saving and reloading mid-training changes nothing."""
        inputs, outputs = xor_data
        for x, y in zip(inputs, outputs):
            xor_network.train(x, y)

        path = tmp_path / "xor.json"
        xor_network.save(path)
        resumed = Network.load(path)

        for _ in range(20):
            for x, y in zip(inputs, outputs):
                xor_network.train(x, y)
                resumed.train(x, y)

        for x in inputs:
            np.testing.assert_array_equal(resumed.forward(x), xor_network.forward(x))

    def test_regularized_training_is_finite(self, xor_network, xor_data):
        """Test training with weight decay and gradient clipping enabled."""
        xor_network.parameters.set(NetworkParameters.WEIGHT_DECAY, 1e-3)
        xor_network.parameters.set(NetworkParameters.GRADIENT_CLIP, 0.5)
        inputs, outputs = xor_data
        for _ in range(100):
            for x, y in zip(inputs, outputs):
                cost = xor_network.train(x, y)
                assert np.isfinite(cost)


# ============================================================================
# Test neuro-evolution end-to-end
# ============================================================================

class TestXOREvolution:
    """A minimal (1+4) evolution strategy built on mutate_new()."""

    def test_fitness_never_decreases(self, xor_network, xor_data):
        """Test that keeping the best of parent and offspring improves fitness."""
        inputs, outputs = xor_data
        rng = np.random.default_rng(42)

        parent = xor_network
        parent.fitness = -total_cost(parent, inputs, outputs)
        initial = parent.fitness

        for _ in range(100):
            offspring = [parent.mutate_new(0.3, 0.5, rng) for _ in range(4)]
            for child in offspring:
                child.fitness = -total_cost(child, inputs, outputs)
            best = max(offspring, key=lambda child: child.fitness)
            if best.fitness >= parent.fitness:
                parent = best

        assert parent.fitness > initial


# ============================================================================
# Test configuration file end-to-end
# ============================================================================

class TestXORFromConfig:
    """Build the XOR network from an INI file."""

    def test_config_file(self, tmp_path, xor_data):
        """Test reading, building, training and saving a configured network."""
        path = tmp_path / "xor.ini"
        path.write_text(
            "[NETWORK]\n"
            "learning_rate = 0.5\n"
            "\n"
            "[INPUT]\n"
            "aliases    = a, b\n"
            "activation = tanh\n"
            "\n"
            "[INTERMEDIATE]\n"
            "nodes      = 4\n"
            "activation = sigmoid\n"
            "\n"
            "[OUTPUT]\n"
            "aliases = xor\n"
        )
        network = Config(str(path)).build_network()
        inputs, outputs = xor_data

        before = total_cost(network, inputs, outputs)
        for _ in range(300):
            for (a, b), (y,) in zip(inputs, outputs):
                network.train_named({"a": a, "b": b}, {"XOR": y})
        assert total_cost(network, inputs, outputs) < before

        restored = Network.loads(network.dumps())
        assert restored.forward_named({"a": 1.0, "b": 0.0}) == network.forward_named({"a": 1.0, "b": 0.0})
