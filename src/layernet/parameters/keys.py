"""
LayerNet Parameter Keys Module

The registered parameter descriptors. Activation functions read their
parameters through 'LayerParameters', the network reads its hyperparameters
through 'NetworkParameters'.

Classes:
    LayerParameters:   Descriptors read by activation functions
    NetworkParameters: Descriptors of the network-wide hyperparameters

Functions:
    find_parameter(key): Look up a registered descriptor by key (case-insensitive)
"""

from layernet.parameters.named_parameter import NamedParameter, Range

class LayerParameters:

    # Slope applied to non-positive inputs of the Leaky ReLU.
    LEAKY_RELU_ALPHA = NamedParameter("LeakyReLUAlpha", float, 0.01)

    # Saturation value (-alpha) of the ELU for large negative inputs.
    ELU_ALPHA = NamedParameter("ELUAlpha", float, 1.0)

    # SELU constants, chosen for self-normalizing behaviour.
    SELU_ALPHA  = NamedParameter("SELUAlpha" , float, 1.6732632423543772)
    SELU_LAMBDA = NamedParameter("SELULambda", float, 1.0507009873554805)

    # Slope and output bounds of the clamped Linear activation.
    LINEAR_ALPHA = NamedParameter("LinearAlpha", float, 1.0)
    LINEAR_RANGE = NamedParameter("LinearRange", Range, Range(-1.0, 1.0))

    # Slope applied outside the range of the PiecewiseLinear activation.
    PIECEWISE_LINEAR_ALPHA = NamedParameter("PiecewiseLinearAlpha", float, 0.1)
    PIECEWISE_LINEAR_RANGE = NamedParameter("PiecewiseLinearRange", Range, Range(-1.0, 1.0))

    # Higher values soften the SoftMax probabilities, lower values sharpen them.
    SOFTMAX_TEMPERATURE = NamedParameter("SoftMaxTemperature", float, 1.0)

    # Batch normalization of the layer's weighted sums: (sum - mean) / std * gamma + beta.
    USE_BATCH_NORM      = NamedParameter("UseBatchNorm"     , bool , False)
    BATCH_NORM_GAMMA    = NamedParameter("BatchNormGamma"   , float, 1.0)
    BATCH_NORM_BETA     = NamedParameter("BatchNormBeta"    , float, 0.0)
    BATCH_NORM_MOMENTUM = NamedParameter("BatchNormMomentum", float, 0.9)

class NetworkParameters:

    LEARNING_RATE = NamedParameter("LearningRate", float, 0.01)

    # L2 penalty coefficient added to every weight gradient (0 disables it).
    WEIGHT_DECAY = NamedParameter("WeightDecay", float, 0.0)

    # Element-wise bound applied to every gradient (0 disables clipping).
    GRADIENT_CLIP = NamedParameter("GradientClip", float, 0.0)

    # Consumed by external training orchestration, persisted with the network.
    USE_ADAM = NamedParameter("UseAdam", bool, False)

    # Network-wide batch normalization settings, used by every layer that does not set its own.
    USE_BATCH_NORM      = LayerParameters.USE_BATCH_NORM
    BATCH_NORM_GAMMA    = LayerParameters.BATCH_NORM_GAMMA
    BATCH_NORM_BETA     = LayerParameters.BATCH_NORM_BETA
    BATCH_NORM_MOMENTUM = LayerParameters.BATCH_NORM_MOMENTUM

def _collect(*holders) -> dict[str, NamedParameter]:
    registry = {}
    for holder in holders:
        for name, value in vars(holder).items():
            if isinstance(value, NamedParameter):
                registry[value.key.lower()] = value
    return registry

_registry = _collect(LayerParameters, NetworkParameters)

def find_parameter(key: str) -> NamedParameter | None:
    """
    Look up a registered descriptor.

    Parameters:
        key: the descriptor key, any letter case

    Returns:
        the descriptor, or None if no descriptor is registered under 'key'
    """
    return _registry.get(key.lower())
