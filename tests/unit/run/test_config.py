"""
Unit tests for Config class.
"""

import pytest
import os
import numpy as np

from layernet.activations import ActivationType
from layernet.errors      import ConfigurationError
from layernet.network     import Network
from layernet.parameters  import LayerParameters, NetworkParameters, Range
from layernet.run.config  import Config
from layernet.topology    import LayerKind


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def test_config_dir():
    """Return the directory containing test configuration files."""
    return os.path.join(os.path.dirname(__file__), 'test_configs')


@pytest.fixture
def full_config(test_config_dir):
    """Config read from the file using every option."""
    return Config(os.path.join(test_config_dir, 'full.ini'))


@pytest.fixture
def write_config(tmp_path):
    """Write INI text to a temporary file and return its path."""
    def _write(text):
        path = tmp_path / "config.ini"
        path.write_text(text)
        return str(path)
    return _write


# ============================================================================
# Test Config Initialization
# ============================================================================

class TestConfigInit:
    """Test Config initialization."""

    def test_init_without_file_uses_defaults(self):
        """Test that Config() without file holds default hyperparameters."""
        config = Config()

        assert config.learning_rate == 0.01
        assert config.weight_decay == 0.0
        assert config.gradient_clip == 0.0
        assert config.use_adam is False
        assert config.use_batch_norm is False
        assert config.batch_norm_momentum == 0.9
        assert config.layers == []

    def test_init_with_nonexistent_file_raises_error(self):
        """Test that Config with nonexistent file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Configuration file .* not found"):
            Config('nonexistent_file.ini')

    def test_init_with_minimal_config(self, test_config_dir):
        """Test initialization with minimal configuration file."""
        config = Config(os.path.join(test_config_dir, 'minimal.ini'))

        assert config.learning_rate == 0.1
        assert config.weight_decay == 0.0
        assert [layer['kind'] for layer in config.layers] == [LayerKind.INPUT, LayerKind.OUTPUT]
        assert config.layers[0]['nodes'] == 2
        assert config.layers[0]['activation'] == 'none'


# ============================================================================
# Test Config NETWORK Section
# ============================================================================

class TestConfigNetwork:
    """Test Config NETWORK section parsing."""

    def test_values(self, full_config):
        """Test every hyperparameter."""
        assert full_config.learning_rate == 0.05
        assert full_config.weight_decay == 0.001
        assert full_config.gradient_clip == 5.0
        assert full_config.use_adam is True
        assert full_config.use_batch_norm is False
        assert full_config.batch_norm_momentum == 0.8

    def test_learning_rate_required(self, write_config):
        """Test that learning_rate is required."""
        path = write_config("[NETWORK]\n[INPUT]\nnodes = 1\n[OUTPUT]\nnodes = 1\n")
        with pytest.raises(ConfigurationError, match="learning_rate"):
            Config(path)

    def test_invalid_number(self, write_config):
        """Test that malformed numbers are configuration errors."""
        path = write_config("[NETWORK]\nlearning_rate = fast\n[INPUT]\nnodes = 1\n[OUTPUT]\nnodes = 1\n")
        with pytest.raises(ConfigurationError, match="invalid value for 'learning_rate'"):
            Config(path)

    def test_network_parameters(self, full_config):
        """Test conversion of the hyperparameters to a ParameterStore."""
        store = full_config.network_parameters()
        assert store.get(NetworkParameters.LEARNING_RATE) == 0.05
        assert store.get(NetworkParameters.USE_ADAM) is True
        assert store.get(NetworkParameters.BATCH_NORM_MOMENTUM) == 0.8


# ============================================================================
# Test Config layer sections
# ============================================================================

class TestConfigLayers:
    """Test the INPUT, INTERMEDIATE and OUTPUT sections."""

    def test_layer_order(self, full_config):
        """Test that intermediate sections keep their file order."""
        kinds = [layer['kind'] for layer in full_config.layers]
        assert kinds == [LayerKind.INPUT, LayerKind.INTERMEDIATE, LayerKind.INTERMEDIATE, LayerKind.OUTPUT]
        assert [layer['nodes'] for layer in full_config.layers[1:3]] == [6, 4]

    def test_aliases(self, full_config):
        """Test comma-separated aliases."""
        assert full_config.layers[0]['aliases'] == ['distance', 'angle', 'speed']
        assert full_config.layers[0]['nodes'] is None

    def test_inline_comment_stripped(self, full_config):
        """Test that inline comments are not part of the value."""
        assert full_config.layers[-1]['activation'] == 'softmax'

    def test_activation_parameters(self, full_config):
        """Test that extra keys are kept as activation parameters."""
        assert full_config.layers[1]['parameters'] == {'leakyrelualpha': '0.02'}
        assert full_config.layers[2]['parameters'] == {'linearalpha': '0.5', 'linearrange': '$[-3,3]'}

    def test_missing_output_section(self, test_config_dir):
        """Test that the OUTPUT section is required."""
        with pytest.raises(ConfigurationError, match=r"missing section \[OUTPUT\]"):
            Config(os.path.join(test_config_dir, 'no_output.ini'))

    def test_nodes_or_aliases_required(self, write_config):
        """Test that a layer section needs nodes or aliases."""
        path = write_config("[NETWORK]\nlearning_rate = 0.1\n[INPUT]\nactivation = relu\n[OUTPUT]\nnodes = 1\n")
        with pytest.raises(ConfigurationError, match="needs 'nodes' or 'aliases'"):
            Config(path)

    def test_unknown_section(self, write_config):
        """Test that unexpected sections are rejected."""
        path = write_config("[NETWORK]\nlearning_rate = 0.1\n[INPUT]\nnodes = 1\n[OUTPUT]\nnodes = 1\n[EXTRA]\n")
        with pytest.raises(ConfigurationError, match="unknown section"):
            Config(path)

    def test_section_names_any_case(self, write_config):
        """Test that section names are matched in any letter case."""
        path = write_config("[network]\nlearning_rate = 0.2\n[input]\nnodes = 2\n"
                            "[Intermediate 1]\nnodes = 3\nactivation = sigmoid\n[Output]\nnodes = 1\n")
        config = Config(path)
        assert config.learning_rate == 0.2
        assert [layer['nodes'] for layer in config.layers] == [2, 3, 1]
        assert config.build_network().learning_rate == 0.2

    def test_duplicate_section(self, write_config):
        """Test that the same section in two letter cases is rejected."""
        path = write_config("[NETWORK]\nlearning_rate = 0.1\n[INPUT]\nnodes = 1\n[input]\nnodes = 2\n[OUTPUT]\nnodes = 1\n")
        with pytest.raises(ConfigurationError, match="duplicate section"):
            Config(path)

    def test_layer_batch_normalization(self, write_config):
        """Test that a layer section can enable batch normalization."""
        path = write_config("[NETWORK]\nlearning_rate = 0.1\n[INPUT]\nnodes = 2\n"
                            "[INTERMEDIATE]\nnodes = 3\nactivation = tanh\nUseBatchNorm = True\nBatchNormGamma = 2.0\n"
                            "[OUTPUT]\nnodes = 1\n")
        network = Config(path).build_network()
        network.forward([0.4, -0.2])
        assert network.layers[1].batch_norm is not None
        assert network.layers[1].batch_norm.gamma == 2.0
        assert network.output_layer.batch_norm is None


# ============================================================================
# Test building
# ============================================================================

class TestConfigBuild:
    """Test conversion to a configuration and a network."""

    def test_to_configuration(self, full_config):
        """Test the produced NetworkConfiguration."""
        configuration = full_config.to_configuration()
        layers = configuration.layers
        assert configuration.learning_rate == 0.05
        assert layers[0].activation_type is ActivationType.TANH
        assert layers[1].parameters.get(LayerParameters.LEAKY_RELU_ALPHA) == 0.02
        assert layers[2].parameters.get(LayerParameters.LINEAR_RANGE) == Range(-3.0, 3.0)
        assert layers[3].activation_type is ActivationType.SOFTMAX
        assert layers[3].parameters.get(LayerParameters.SOFTMAX_TEMPERATURE) == 2.0

    def test_build_network(self, full_config):
        """Test that the network matches the file."""
        network = full_config.build_network(np.random.default_rng(1))
        assert isinstance(network, Network)
        assert [layer.size for layer in network.layers] == [3, 6, 4, 2]
        assert network.parameters.get(NetworkParameters.GRADIENT_CLIP) == 5.0
        result = network.forward_named({"distance": 1.0, "angle": 0.5, "speed": -0.2})
        assert result.keys() == ["move_away", "adjust_speed"]
        assert sum(result.to_list()) == pytest.approx(1.0)

    def test_alias_count_mismatch(self, test_config_dir):
        """Test that structural errors surface when building."""
        config = Config(os.path.join(test_config_dir, 'bad_alias_count.ini'))
        with pytest.raises(ConfigurationError, match="3 aliases but 2 nodes"):
            config.to_configuration()

    def test_unknown_parameter(self, test_config_dir):
        """Test that unknown parameter keys are rejected."""
        config = Config(os.path.join(test_config_dir, 'unknown_parameter.ini'))
        with pytest.raises(ConfigurationError, match="Invalid layer parameters"):
            config.to_configuration()

    def test_empty_config_cannot_build(self):
        """Test that Config() without layers is incomplete."""
        with pytest.raises(ConfigurationError):
            Config().to_configuration()

    def test_manual_layers(self):
        """Test filling in the layers of a default Config by hand."""
        config = Config()
        config.layers = [
            {'kind': LayerKind.INPUT , 'nodes': 2, 'aliases': None, 'activation': 'sigmoid', 'parameters': {}},
            {'kind': LayerKind.OUTPUT, 'nodes': 1, 'aliases': None, 'activation': 'none'   , 'parameters': {}},
        ]
        network = config.build_network(np.random.default_rng(2))
        assert network.learning_rate == 0.01
        assert network.forward([0.0, 1.0]).shape == (1,)
