"""
Unit tests for the forward pass.
"""

import pytest
import numpy as np

from layernet.activations import ActivationType
from layernet.engine      import forward_pass
from layernet.errors      import ShapeError
from layernet.network     import Network
from layernet.parameters  import LayerParameters, NetworkParameters
from layernet.topology    import NetworkConfiguration


def sigmoid(z):
    return 1.0 / (1.0 + np.exp(-z))


class TestForwardValues:
    """Test the computed values."""

    def test_matches_manual_computation(self, network_2_2_1):
        """Test a 2-2-1 network against a hand computation."""
        x  = np.array([0.05, 0.10])
        z1 = np.array([[0.15, 0.20], [0.25, 0.30]]) @ x + 0.35
        h  = z1                                    # input layer has no activation
        z2 = np.array([0.40, 0.45]) @ h + 0.60
        expected = sigmoid(z2)                     # intermediate layer drives the output

        result = network_2_2_1.forward(x)
        np.testing.assert_allclose(result, [expected], rtol=1e-12)

    def test_activation_of_previous_layer_is_used(self, small_network):
        """Test that the activation of layer i-1 transforms the sums of layer i."""
        x = np.array([0.3, -0.8])
        input_layer, hidden, output = small_network.layers

        z1 = hidden.weights @ x + hidden.biases
        a1 = np.tanh(z1)                           # input layer activation
        z2 = output.weights @ a1 + output.biases
        a2 = sigmoid(z2)                           # intermediate layer activation

        np.testing.assert_allclose(small_network.forward(x), a2, rtol=1e-12)
        np.testing.assert_allclose(hidden.sums, z1, rtol=1e-12)
        np.testing.assert_allclose(hidden.values, a1, rtol=1e-12)

    def test_input_values_are_raw(self, small_network):
        """Test that input neurons hold the input vector as given."""
        small_network.forward([5.0, -7.0])
        np.testing.assert_array_equal(small_network.input_layer.values, [5.0, -7.0])

    def test_returns_copy(self, small_network):
        """Test that the result does not alias the output layer's values."""
        result = small_network.forward([0.1, 0.2])
        result[0] = 123.0
        assert small_network.output_layer.values[0] != 123.0

    def test_deterministic(self, small_network):
        """Test that repeated calls give bit-identical results."""
        first  = small_network.forward([0.25, -0.5])
        small_network.forward([1.0, 1.0])
        second = small_network.forward([0.25, -0.5])
        np.testing.assert_array_equal(first, second)

    def test_softmax_output(self, rng):
        """Test that a softmax output layer produces probabilities."""
        configuration = NetworkConfiguration()
        configuration.add_input_layer(3, ActivationType.RELU)
        configuration.add_intermediate_layer(4, ActivationType.TANH)
        configuration.add_output_layer(5, ActivationType.SOFTMAX)
        network = Network(configuration, rng)

        result = network.forward([0.5, -1.0, 2.0])
        assert result.sum() == pytest.approx(1.0)
        assert np.all(result >= 0)

    def test_forward_pass_function(self, network_2_2_1):
        """Test that the engine function and the method agree."""
        x = [0.4, 0.6]
        np.testing.assert_array_equal(forward_pass(network_2_2_1.layers, x), network_2_2_1.forward(x))


class TestForwardNumericGuards:
    """Test that numeric hazards are neutralized."""

    def test_non_finite_product_counts_as_zero(self, network_2_2_1):
        """Test that inf * 0 does not poison the sum."""
        network_2_2_1.layers[1].weights[0, 0] = np.inf
        network_2_2_1.forward([0.0, 1.0])
        assert network_2_2_1.layers[1].sums[0] == pytest.approx(0.20 + 0.35)

    def test_sums_are_clamped(self, network_2_2_1):
        """Test that weighted sums are clamped to +/-1e6."""
        network_2_2_1.layers[1].weights[:] = 1e200
        network_2_2_1.forward([1e100, 1e100])
        np.testing.assert_array_equal(network_2_2_1.layers[1].sums, [1e6, 1e6])
        assert np.all(np.isfinite(network_2_2_1.output_layer.values))

    def test_nan_input(self, network_2_2_1):
        """Test that a NaN input does not produce a NaN output."""
        result = network_2_2_1.forward([np.nan, 0.5])
        assert np.all(np.isfinite(result))


class TestForwardShapes:
    """Test input validation."""

    @pytest.mark.parametrize("inputs", [[1.0], [1.0, 2.0, 3.0], [[1.0, 2.0]], []])
    def test_wrong_length(self, network_2_2_1, inputs):
        """Test that the input vector must have one value per input neuron."""
        with pytest.raises(ShapeError, match="Expected 2 input values"):
            network_2_2_1.forward(inputs)


class TestBatchNormalization:
    """Test batch normalization of the weighted sums."""

    def test_disabled_by_default(self, network_2_2_1):
        """Test that sums are left alone unless batch normalization is enabled."""
        network_2_2_1.forward([0.05, 0.10])
        for layer in network_2_2_1.layers[1:]:
            assert layer.batch_norm is None

    def test_matches_manual_computation(self, network_2_2_1):
        """Test a normalized intermediate layer against a hand computation."""
        hidden = network_2_2_1.layers[1]
        hidden.parameters.set(LayerParameters.USE_BATCH_NORM  , True)
        hidden.parameters.set(LayerParameters.BATCH_NORM_GAMMA, 2.0)
        hidden.parameters.set(LayerParameters.BATCH_NORM_BETA , 0.5)

        x  = np.array([0.05, 0.10])
        z1 = np.array([[0.15, 0.20], [0.25, 0.30]]) @ x + 0.35
        normalized = (z1 - z1.mean()) / np.sqrt(z1.var() + 1e-8)
        h  = 2.0 * normalized + 0.5
        z2 = np.array([0.40, 0.45]) @ h + 0.60

        result = network_2_2_1.forward(x)
        np.testing.assert_allclose(hidden.sums, h)
        np.testing.assert_allclose(result, sigmoid(z2))
        assert hidden.batch_norm.gamma == 2.0

    def test_network_wide_setting(self, small_network):
        """Test that the network hyperparameter enables normalization in every layer."""
        inputs = [0.3, -0.4]
        before = small_network.forward(inputs)

        small_network.parameters.set(NetworkParameters.USE_BATCH_NORM, True)
        after = small_network.forward(inputs)

        assert not np.allclose(before, after)
        for layer in small_network.layers[1:]:
            assert layer.batch_norm is not None
            assert layer.sums.mean() == pytest.approx(0.0, abs=1e-9)

    def test_layer_setting_overrides_network(self, small_network):
        """Test that a layer can opt out of network-wide normalization."""
        small_network.parameters.set(NetworkParameters.USE_BATCH_NORM, True)
        small_network.layers[1].parameters.set(LayerParameters.USE_BATCH_NORM, False)

        small_network.forward([0.3, -0.4])

        assert small_network.layers[1].batch_norm is None
        assert small_network.layers[2].batch_norm is not None

    def test_single_neuron_layer(self, network_2_2_1):
        """Test that a single-neuron layer normalizes to its shift."""
        output_layer = network_2_2_1.output_layer
        output_layer.parameters.set(LayerParameters.USE_BATCH_NORM, True)
        output_layer.parameters.set(LayerParameters.BATCH_NORM_BETA, 0.25)

        result = network_2_2_1.forward([0.05, 0.10])
        np.testing.assert_allclose(result, sigmoid(np.array([0.25])))
