import autograd.numpy as np  # type: ignore

# Weighted sums are clamped to this magnitude before activation.
SUM_LIMIT = 1e6

# Floor of the SoftMax normalization constant.
SOFTMAX_EPSILON = 1e-12

def _neutralize(z):
    # NaN and +/-inf are replaced with zero
    return np.where(np.isfinite(z), z, 0.0)

def _sigmoid(z):
    z = np.clip(z, -500, 500)   # to prevent overflow when calculating exp
    return 1.0 / (1.0 + np.exp(-z))

def _softplus(z):
    return np.logaddexp(0.0, z)

# ----- activations

def identity_activation(z):
    return _neutralize(z)

def linear_activation(z, alpha=1.0, bounds=(-1.0, 1.0)):
    z = _neutralize(z)
    return np.clip(alpha * z, bounds[0], bounds[1])

def piecewise_linear_activation(z, alpha=0.1, bounds=(-1.0, 1.0)):
    z = _neutralize(z)
    outside = (z <= bounds[0]) | (z >= bounds[1])
    return np.where(outside, alpha * z, z)

def relu_activation(z):
    z = _neutralize(z)
    return np.maximum(0.0, z)

def leaky_relu_activation(z, alpha=0.01):
    z = _neutralize(z)
    return np.where(z > 0, z, alpha * z)

def sigmoid_activation(z):
    return _sigmoid(_neutralize(z))

def tanh_activation(z):
    return np.tanh(_neutralize(z))

def elu_activation(z, alpha=1.0):
    z = _neutralize(z)
    negative = np.minimum(z, 0.0)   # keeps exp from overflowing on the unused branch
    return np.where(z > 0, z, alpha * (np.exp(negative) - 1.0))

def selu_activation(z, alpha=1.6732632423543772, scale=1.0507009873554805):
    z = _neutralize(z)
    negative = np.minimum(z, 0.0)
    return scale * np.where(z > 0, z, alpha * (np.exp(negative) - 1.0))

def softplus_activation(z):
    return _softplus(_neutralize(z))

def softsign_activation(z):
    z = _neutralize(z)
    return z / (1.0 + np.abs(z))

def swish_activation(z):
    z = _neutralize(z)
    return z * _sigmoid(z)

def mish_activation(z):
    z = _neutralize(z)
    return z * np.tanh(_softplus(z))

def gaussian_activation(z):
    z = _neutralize(z)
    return np.exp(-z * z)

def hard_sigmoid_activation(z):
    z = _neutralize(z)
    return np.clip(0.2 * z + 0.5, 0.0, 1.0)

def hard_tanh_activation(z):
    z = _neutralize(z)
    return np.clip(z, -1.0, 1.0)

def softmax_activation(z, temperature=1.0):
    """
    Normalize a whole vector into probabilities.

    The maximum is subtracted before exponentiating; non-finite exponentials
    count as zero and a zero normalization constant is floored at SOFTMAX_EPSILON.
    """
    z = _neutralize(z) / temperature
    exps = np.exp(z - np.max(z))
    exps = np.where(np.isfinite(exps), exps, 0.0)
    total = np.sum(exps)
    if not np.isfinite(total) or total == 0:
        total = SOFTMAX_EPSILON
    return exps / total

def simple_softmax_activation(z):
    return softmax_activation(z, 1.0)

# ----- derivatives (evaluated at the pre-activation value)

def identity_derivative(z):
    return np.ones_like(z, dtype=float)

def linear_derivative(z, alpha=1.0, bounds=(-1.0, 1.0)):
    y = alpha * z
    return np.where((y > bounds[0]) & (y < bounds[1]), alpha, 0.0)

def piecewise_linear_derivative(z, alpha=0.1, bounds=(-1.0, 1.0)):
    outside = (z <= bounds[0]) | (z >= bounds[1])
    return np.where(outside, alpha, 1.0)

def relu_derivative(z):
    return np.where(z > 0, 1.0, 0.0)

def leaky_relu_derivative(z, alpha=0.01):
    return np.where(z > 0, 1.0, alpha)

def sigmoid_derivative(z):
    s = _sigmoid(z)
    return s * (1.0 - s)

def tanh_derivative(z):
    t = np.tanh(z)
    return 1.0 - t * t

def elu_derivative(z, alpha=1.0):
    return np.where(z > 0, 1.0, alpha * np.exp(np.minimum(z, 0.0)))

def selu_derivative(z, alpha=1.6732632423543772, scale=1.0507009873554805):
    return scale * np.where(z > 0, 1.0, alpha * np.exp(np.minimum(z, 0.0)))

def softplus_derivative(z):
    return _sigmoid(z)

def softsign_derivative(z):
    denominator = 1.0 + np.abs(z)
    return 1.0 / (denominator * denominator)

def swish_derivative(z):
    s = _sigmoid(z)
    return s + z * s * (1.0 - s)

def mish_derivative(z):
    t = np.tanh(_softplus(z))
    return t + z * _sigmoid(z) * (1.0 - t * t)

def gaussian_derivative(z):
    return -2.0 * z * np.exp(-z * z)

def hard_sigmoid_derivative(z):
    return np.where((z > -2.5) & (z < 2.5), 0.2, 0.0)

def hard_tanh_derivative(z):
    return np.where((z > -1.0) & (z < 1.0), 1.0, 0.0)

def softmax_derivative(z, temperature=1.0):
    # The gradient of a normalizing output is taken from the cross-entropy
    # loss as a whole (see ActivationFunction.output_gradient).
    return np.ones_like(z, dtype=float)

def simple_softmax_derivative(z):
    return np.ones_like(z, dtype=float)

activations = {
    "identity"        : identity_activation,
    "linear"          : linear_activation,
    "piecewise_linear": piecewise_linear_activation,
    "relu"            : relu_activation,
    "leaky_relu"      : leaky_relu_activation,
    "sigmoid"         : sigmoid_activation,
    "tanh"            : tanh_activation,
    "softmax"         : softmax_activation,
    "simple_softmax"  : simple_softmax_activation,
    "elu"             : elu_activation,
    "selu"            : selu_activation,
    "softplus"        : softplus_activation,
    "softsign"        : softsign_activation,
    "swish"           : swish_activation,
    "mish"            : mish_activation,
    "gaussian"        : gaussian_activation,
    "hard_sigmoid"    : hard_sigmoid_activation,
    "hard_tanh"       : hard_tanh_activation
    }

derivatives = {
    "identity"        : identity_derivative,
    "linear"          : linear_derivative,
    "piecewise_linear": piecewise_linear_derivative,
    "relu"            : relu_derivative,
    "leaky_relu"      : leaky_relu_derivative,
    "sigmoid"         : sigmoid_derivative,
    "tanh"            : tanh_derivative,
    "softmax"         : softmax_derivative,
    "simple_softmax"  : simple_softmax_derivative,
    "elu"             : elu_derivative,
    "selu"            : selu_derivative,
    "softplus"        : softplus_derivative,
    "softsign"        : softsign_derivative,
    "swish"           : swish_derivative,
    "mish"            : mish_derivative,
    "gaussian"        : gaussian_derivative,
    "hard_sigmoid"    : hard_sigmoid_derivative,
    "hard_tanh"       : hard_tanh_derivative
    }

# 3-letter identifiers for each activation function
activation_codes = {
    "none"            : "---",
    "identity"        : "IDN",
    "linear"          : "LIN",
    "piecewise_linear": "PWL",
    "relu"            : "RLU",
    "leaky_relu"      : "LRL",
    "sigmoid"         : "SIG",
    "tanh"            : "TNH",
    "softmax"         : "SMX",
    "simple_softmax"  : "SSM",
    "elu"             : "ELU",
    "selu"            : "SLU",
    "softplus"        : "SPL",
    "softsign"        : "SSG",
    "swish"           : "SWH",
    "mish"            : "MSH",
    "gaussian"        : "GSS",
    "hard_sigmoid"    : "HSG",
    "hard_tanh"       : "HTH"
    }
