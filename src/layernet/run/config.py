import configparser
import logging
import os
import numpy as np
from typing import TYPE_CHECKING

from layernet.errors      import ConfigurationError
from layernet.parameters  import NetworkParameters, ParameterStore
from layernet.topology    import LayerKind, NetworkConfiguration

if TYPE_CHECKING:
    from layernet.network import Network

logger = logging.getLogger(__name__)

# Keys of a layer section that are not activation parameters.
_LAYER_KEYS = ('nodes', 'aliases', 'activation')

class Config:

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or create a default Config.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, creates a Config holding default hyperparameters
                         and no layers, for manual attribute setting.

        Raises:
            FileNotFoundError:  if 'config_file' does not exist
            ConfigurationError: if a required section or key is missing or invalid
        """

        # Default config for testing/manual setup
        if config_file is None:
            self.learning_rate       = NetworkParameters.LEARNING_RATE.default
            self.weight_decay        = NetworkParameters.WEIGHT_DECAY.default
            self.gradient_clip       = NetworkParameters.GRADIENT_CLIP.default
            self.use_adam            = NetworkParameters.USE_ADAM.default
            self.use_batch_norm      = NetworkParameters.USE_BATCH_NORM.default
            self.batch_norm_momentum = NetworkParameters.BATCH_NORM_MOMENTUM.default

            # One dict per layer, input first; see '_parse_layer()' for the keys
            self.layers = []
            return

        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Configuration file '{config_file}' not found")

        parser = configparser.ConfigParser(inline_comment_prefixes=(';', '#'))
        parser.read(config_file)

        # Sentinel for missing default values
        _NO_DEFAULT = object()

        # Helper function to safely parse values
        def get_value(section, key, value_type, default=_NO_DEFAULT):
            try:
                raw_value = parser.get(section, key)
                if raw_value.lower() == 'none' and value_type != str:
                    return None
                if value_type == int:
                    return parser.getint(section, key)
                elif value_type == float:
                    return parser.getfloat(section, key)
                elif value_type == bool:
                    return parser.getboolean(section, key)
                elif value_type == str:
                    return raw_value
            except (configparser.NoSectionError, configparser.NoOptionError) as e:
                if default is not _NO_DEFAULT:
                    return default
                raise ConfigurationError(f"{config_file}: {e.message}") from e
            except ValueError as e:
                raise ConfigurationError(f"{config_file}: invalid value for '{key}' in [{section}]: {e}") from e

        # Section names are matched in any letter case; map each to its name in the file
        sections = {}
        intermediate_sections = []
        for section in parser.sections():
            name = section.strip().upper()
            if name.startswith('INTERMEDIATE'):
                intermediate_sections.append(section)
            elif name in ('NETWORK', 'INPUT', 'OUTPUT'):
                if name in sections:
                    raise ConfigurationError(f"{config_file}: duplicate section [{section}]")
                sections[name] = section
            else:
                raise ConfigurationError(f"{config_file}: unknown section [{section}]")

        for required in ('INPUT', 'OUTPUT'):
            if required not in sections:
                raise ConfigurationError(f"{config_file}: missing section [{required}]")
        network = sections.get('NETWORK', 'NETWORK')

        # [NETWORK]

        # The step size of gradient descent. Must be positive.
        self.learning_rate = get_value(network, 'learning_rate', float)

        # Coefficient of the L2 penalty added to every weight gradient (0 disables it).
        self.weight_decay = get_value(network, 'weight_decay', float, default=0.0)

        # Bound applied to every gradient component (0 disables clipping).
        self.gradient_clip = get_value(network, 'gradient_clip', float, default=0.0)

        # Optimizer setting, stored with the network for the training loop that drives it.
        self.use_adam = get_value(network, 'use_adam', bool, default=False)

        # Batch normalization of every layer that does not set 'UseBatchNorm' itself.
        self.use_batch_norm      = get_value(network, 'use_batch_norm'     , bool , default=False)
        self.batch_norm_momentum = get_value(network, 'batch_norm_momentum', float, default=0.9)

        # [INPUT], [INTERMEDIATE ...], [OUTPUT]

        # Every layer section declares either the number of neurons ('nodes') or
        # their names ('aliases', comma-separated), optionally an activation
        # function ('activation', default "none"), and any activation parameter
        # by its key (e.g. 'LeakyReLUAlpha = 0.02').
        # Intermediate layers are added in the order their sections appear.
        self.layers = [Config._parse_layer(parser, sections['INPUT'], LayerKind.INPUT, get_value)]
        for section in intermediate_sections:
            self.layers.append(Config._parse_layer(parser, section, LayerKind.INTERMEDIATE, get_value))
        self.layers.append(Config._parse_layer(parser, sections['OUTPUT'], LayerKind.OUTPUT, get_value))

        logger.debug("Read %d layers from %s", len(self.layers), config_file)

    @staticmethod
    def _parse_layer(parser, section, kind, get_value) -> dict:
        """
        Read a layer section.

        Returns:
            dictionary with keys 'kind', 'nodes', 'aliases', 'activation', 'parameters'
        """
        nodes   = get_value(section, 'nodes'  , int, default=None)
        aliases = get_value(section, 'aliases', str, default=None)
        if aliases is not None:
            aliases = [alias.strip() for alias in aliases.split(',') if alias.strip()]
        if nodes is None and aliases is None:
            raise ConfigurationError(f"Section [{section}] needs 'nodes' or 'aliases'")

        parameters = {key: value for key, value in parser.items(section) if key not in _LAYER_KEYS}

        return {
            'kind'      : kind,
            'nodes'     : nodes,
            'aliases'   : aliases,
            'activation': get_value(section, 'activation', str, default='none'),
            'parameters': parameters
        }

    def network_parameters(self) -> ParameterStore:
        """The hyperparameters as a ParameterStore."""
        store = ParameterStore()
        store.set(NetworkParameters.LEARNING_RATE      , float(self.learning_rate))
        store.set(NetworkParameters.WEIGHT_DECAY       , float(self.weight_decay))
        store.set(NetworkParameters.GRADIENT_CLIP      , float(self.gradient_clip))
        store.set(NetworkParameters.USE_ADAM           , bool(self.use_adam))
        store.set(NetworkParameters.USE_BATCH_NORM     , bool(self.use_batch_norm))
        store.set(NetworkParameters.BATCH_NORM_MOMENTUM, float(self.batch_norm_momentum))
        return store

    def to_configuration(self) -> NetworkConfiguration:
        """
        Build the NetworkConfiguration described by this Config.

        Raises:
            ConfigurationError: if the layers do not describe a valid network
        """
        configuration = NetworkConfiguration(parameters=self.network_parameters())
        add_layer = {
            LayerKind.INPUT       : configuration.add_input_layer,
            LayerKind.INTERMEDIATE: configuration.add_intermediate_layer,
            LayerKind.OUTPUT      : configuration.add_output_layer
        }
        for layer in self.layers:
            add_layer[layer['kind']](layer['nodes'],
                                     layer['activation'],
                                     layer['parameters'],
                                     layer['aliases'])
        configuration.validate()
        return configuration

    def build_network(self, rng: np.random.Generator | None = None) -> 'Network':
        """Allocate a network with random weights, as described by this Config."""
        # Import here to avoid circular import
        from layernet.network import Network
        return Network(self.to_configuration(), rng)
