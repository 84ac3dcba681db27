"""
LayerNet Backpropagation Module

Computes the gradients of the training loss with respect to every weight and
bias, and applies them.

The loss reported as the cost is one half of the sum of squared output
errors. When the output layer normalizes its values (SoftMax), the error term
of the output layer is the cross-entropy gradient of the normalized outputs.
Layers with batch normalization pass the error term through the derivative of
the normalization before the weight and bias gradients are taken.

All gradients are computed from the weights as they were before the step;
no weight is changed until 'apply_gradients()' runs.

Classes:
    LayerGradient: Gradients of one layer's weights and biases

Functions:
    compute_gradients(layers, inputs, expected):   Forward pass, cost and per-layer gradients
    apply_gradients(layers, gradients, ...):       Gradient-descent update of weights and biases
"""

from typing import NamedTuple
import numpy as np

from layernet.engine.forward import forward_pass
from layernet.errors         import ShapeError

class LayerGradient(NamedTuple):
    weights: np.ndarray   # shape (size, previous size)
    biases:  np.ndarray   # shape (size,)

def _derivative(layer, sums: np.ndarray) -> np.ndarray:
    # Derivative of the activation attached to 'layer' (identity if there is none)
    if layer.activation is None:
        return np.ones_like(sums)
    return layer.activation.derivative(sums)

def _through_batch_norm(layer, gamma: np.ndarray) -> np.ndarray:
    # Error term with respect to the sums before batch normalization
    state = layer.batch_norm
    if state is None:
        return gamma
    normalized = state.normalized
    return (state.gamma / state.std) * (gamma - gamma.mean() - normalized * np.mean(gamma * normalized))

def compute_gradients(layers: list, inputs, expected) -> tuple[float, list[LayerGradient | None]]:
    """
    Run the network on 'inputs' and back-propagate the error against 'expected'.

    Parameters:
        layers:   the layers of the network, input layer first
        inputs:   one value per input neuron
        expected: one value per output neuron

    Returns:
        (cost, gradients) where 'cost' is 0.5 * sum((output - expected)^2) and
        'gradients' holds one LayerGradient per layer (None for the input layer)

    Raises:
        ShapeError: if 'inputs' or 'expected' do not fit the network
    """
    outputs  = forward_pass(layers, inputs)
    expected = np.asarray(expected, dtype=np.float64)
    if expected.shape != outputs.shape:
        raise ShapeError(f"Expected {outputs.size} output values, got shape {expected.shape}")

    with np.errstate(over='ignore', invalid='ignore'):
        errors = outputs - expected
        cost   = 0.5 * float(np.sum(errors * errors))

        output_layer = layers[-1]
        if output_layer.activation is not None:
            delta = output_layer.activation.output_gradient(outputs, expected)
        else:
            delta = errors

        # Error term of the output layer, through the transition governed by the layer before it
        gamma = delta * _derivative(layers[-2], output_layer.sums)

        gradients: list[LayerGradient | None] = [None] * len(layers)
        for i in range(len(layers) - 1, 0, -1):
            previous = layers[i - 1]
            gamma    = _through_batch_norm(layers[i], gamma)
            gradients[i] = LayerGradient(np.outer(gamma, previous.values), gamma.copy())
            if i > 1:
                gamma = (layers[i].weights.T @ gamma) * _derivative(layers[i - 2], previous.sums)

    return cost, gradients

def apply_gradients(layers       : list,
                    gradients    : list[LayerGradient | None],
                    learning_rate: float,
                    weight_decay : float = 0.0,
                    gradient_clip: float = 0.0) -> None:
    """
    Update weights and biases in place: parameter -= learning_rate * gradient.

    Parameters:
        layers:        the layers of the network, input layer first
        gradients:     output of 'compute_gradients()'
        learning_rate: step size
        weight_decay:  L2 coefficient; 'weight_decay * weight' is added to each weight gradient
        gradient_clip: if > 0, every gradient component is clamped to [-gradient_clip, gradient_clip]

    Non-finite gradient components are treated as zero.
    """
    for layer, gradient in zip(layers[1:], gradients[1:]):
        weight_gradient = gradient.weights
        bias_gradient   = gradient.biases
        if weight_decay:
            weight_gradient = weight_gradient + weight_decay * layer.weights
        if gradient_clip > 0:
            weight_gradient = np.clip(weight_gradient, -gradient_clip, gradient_clip)
            bias_gradient   = np.clip(bias_gradient  , -gradient_clip, gradient_clip)

        weight_gradient = np.where(np.isfinite(weight_gradient), weight_gradient, 0.0)
        bias_gradient   = np.where(np.isfinite(bias_gradient)  , bias_gradient  , 0.0)

        layer.weights -= learning_rate * weight_gradient
        layer.biases  -= learning_rate * bias_gradient
