"""
LayerNet Forward Engine Module

Computes the activations of a network layer by layer.

The activation function attached to layer i-1 governs the transition into
layer i: the weighted sums of layer i (plus its biases) are passed through the
activation of the previous layer. The activation attached to the output layer,
if any, normalizes the complete output vector in a final pass.

A layer with batch normalization enabled ('UseBatchNorm', set on the layer or,
failing that, on the network) normalizes its weighted sums to zero mean and
unit variance, then scales them by 'BatchNormGamma' and shifts them by
'BatchNormBeta', before the activation is applied.

Classes:
    BatchNormState: Intermediate values of a batch normalization, kept for training

Functions:
    forward_pass(layers, inputs): Run the network on an input vector
    weighted_sums(layer, previous): Clamped weighted sums plus bias of a layer
    batch_normalize(layer, sums): Batch-normalized sums of a layer, or None
"""

from typing import NamedTuple
import numpy as np

from layernet.activations.basic_activations import SUM_LIMIT
from layernet.errors                        import ShapeError
from layernet.parameters                    import LayerParameters

# Added to the variance before taking the square root.
BATCH_NORM_EPSILON = 1e-8

class BatchNormState(NamedTuple):
    normalized: np.ndarray   # (sum - mean) / std
    std:        float
    gamma:      float

def weighted_sums(layer, previous) -> np.ndarray:
    """
    Weighted sums plus bias of every neuron of 'layer'.

    Non-finite products (e.g. inf * 0) count as zero and every sum is clamped
    to [-SUM_LIMIT, SUM_LIMIT].
    """
    with np.errstate(over='ignore', invalid='ignore'):
        products = layer.weights * previous.values
        products = np.where(np.isfinite(products), products, 0.0)
        sums = products.sum(axis=1) + layer.biases
    sums = np.nan_to_num(sums, nan=0.0, posinf=SUM_LIMIT, neginf=-SUM_LIMIT)
    return np.clip(sums, -SUM_LIMIT, SUM_LIMIT)

def _setting(layer, param):
    # The layer's own value wins over the network-wide one
    if param in layer.parameters:
        return layer.parameters.get(param)
    network = layer.network
    if network is not None:
        return network.parameters.get(param)
    return param.default

def batch_normalize(layer, sums: np.ndarray) -> tuple[np.ndarray, BatchNormState] | None:
    """
    Apply batch normalization to the weighted sums of 'layer'.

    Returns:
        (normalized sums, state), or None if batch normalization is disabled
        for the layer
    """
    if not _setting(layer, LayerParameters.USE_BATCH_NORM):
        return None

    gamma = _setting(layer, LayerParameters.BATCH_NORM_GAMMA)
    beta  = _setting(layer, LayerParameters.BATCH_NORM_BETA)

    mean       = sums.mean()
    std        = float(np.sqrt(np.mean((sums - mean) ** 2) + BATCH_NORM_EPSILON))
    normalized = (sums - mean) / std
    return gamma * normalized + beta, BatchNormState(normalized, std, gamma)

def forward_pass(layers: list, inputs) -> np.ndarray:
    """
    Propagate an input vector through the network.

    The values and weighted sums (after batch normalization, if enabled) of
    every layer are left in place, where the training engine reads them.

    Parameters:
        layers: the layers of the network, input layer first
        inputs: one value per input neuron

    Returns:
        a copy of the output layer's values

    Raises:
        ShapeError: if 'inputs' does not have one value per input neuron
    """
    inputs = np.asarray(inputs, dtype=np.float64)
    input_layer = layers[0]
    if inputs.ndim != 1 or inputs.shape[0] != input_layer.size:
        raise ShapeError(f"Expected {input_layer.size} input values, got shape {inputs.shape}")

    input_layer.values[:] = inputs
    input_layer.sums[:]   = inputs

    for previous, layer in zip(layers[:-1], layers[1:]):
        sums = weighted_sums(layer, previous)
        normalization = batch_normalize(layer, sums)
        if normalization is None:
            layer.batch_norm = None
        else:
            sums, layer.batch_norm = normalization

        layer.sums[:] = sums
        if previous.activation is None:
            layer.values[:] = sums
        else:
            layer.values[:] = previous.activation.activate(sums)

    output_layer = layers[-1]
    if output_layer.activation is not None:
        output_layer.values[:] = output_layer.activation.activate(output_layer.values)

    return output_layer.values.copy()
