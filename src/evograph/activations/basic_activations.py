"""
Basic Activation Functions Module.

Every activation ("squash") function has the signature f(x, derivative=False):
called normally it returns the activation of x, called with derivative=True
it returns the derivative at x. The functions are written with autograd.numpy
so that they accept scalars as well as arrays, and so that user supplied
activations can be differentiated automatically (see register_activation).

Exported:
    activations:         Dictionary mapping activation names to functions
    activation_codes:    Short codes used when drawing networks
    register_activation: Add a custom activation to the registry
    activation_name:     Reverse lookup of a registered function's name
"""

import autograd.numpy as np  # type: ignore
from autograd import grad    # type: ignore
from typing   import Callable

SELU_ALPHA = 1.6732632423543772848170429916717
SELU_SCALE = 1.0507009873554804934193349852946

def logistic_activation(x, derivative=False):
    fx = 1.0 / (1.0 + np.exp(-np.clip(x, -500.0, 500.0)))
    if derivative:
        return fx * (1.0 - fx)
    return fx

def tanh_activation(x, derivative=False):
    if derivative:
        return 1.0 - np.tanh(x) ** 2
    return np.tanh(x)

def identity_activation(x, derivative=False):
    if derivative:
        return np.ones_like(x)
    return x

def step_activation(x, derivative=False):
    if derivative:
        return np.zeros_like(x)
    return np.where(x > 0, 1.0, 0.0)

def relu_activation(x, derivative=False):
    if derivative:
        return np.where(x > 0, 1.0, 0.0)
    return np.where(x > 0, x, 0.0)

def softsign_activation(x, derivative=False):
    d = 1.0 + np.abs(x)
    if derivative:
        return 1.0 / d ** 2
    return x / d

def sinusoid_activation(x, derivative=False):
    if derivative:
        return np.cos(x)
    return np.sin(x)

def gaussian_activation(x, derivative=False):
    d = np.exp(-x ** 2)
    if derivative:
        return -2.0 * x * d
    return d

def bent_identity_activation(x, derivative=False):
    d = np.sqrt(x ** 2 + 1.0)
    if derivative:
        return x / (2.0 * d) + 1.0
    return (d - 1.0) / 2.0 + x

def bipolar_activation(x, derivative=False):
    if derivative:
        return np.zeros_like(x)
    return np.where(x > 0, 1.0, -1.0)

def bipolar_sigmoid_activation(x, derivative=False):
    d = np.exp(-np.clip(x, -500.0, 500.0))
    if derivative:
        return 2.0 * d / (1.0 + d) ** 2
    return 2.0 / (1.0 + d) - 1.0

def hard_tanh_activation(x, derivative=False):
    if derivative:
        return np.where(np.abs(x) < 1.0, 1.0, 0.0)
    return np.maximum(-1.0, np.minimum(1.0, x))

def absolute_activation(x, derivative=False):
    if derivative:
        return np.where(x < 0, -1.0, 1.0)
    return np.abs(x)

def inverse_activation(x, derivative=False):
    if derivative:
        return -np.ones_like(x)
    return 1.0 - x

def selu_activation(x, derivative=False):
    fx = np.where(x > 0, x, SELU_ALPHA * np.exp(np.minimum(x, 0.0)) - SELU_ALPHA)
    if derivative:
        return np.where(x > 0, SELU_SCALE, (fx + SELU_ALPHA) * SELU_SCALE)
    return fx * SELU_SCALE

def softplus_activation(x, derivative=False):
    if derivative:
        return logistic_activation(x)
    return np.logaddexp(0.0, x)

activations = {
    "logistic"       : logistic_activation,
    "tanh"           : tanh_activation,
    "identity"       : identity_activation,
    "step"           : step_activation,
    "relu"           : relu_activation,
    "softsign"       : softsign_activation,
    "sinusoid"       : sinusoid_activation,
    "gaussian"       : gaussian_activation,
    "bent_identity"  : bent_identity_activation,
    "bipolar"        : bipolar_activation,
    "bipolar_sigmoid": bipolar_sigmoid_activation,
    "hard_tanh"      : hard_tanh_activation,
    "absolute"       : absolute_activation,
    "inverse"        : inverse_activation,
    "selu"           : selu_activation,
    "softplus"       : softplus_activation
    }

activation_codes = {
    "logistic"       : "LOG",
    "tanh"           : "TNH",
    "identity"       : "ID",
    "step"           : "STP",
    "relu"           : "RLU",
    "softsign"       : "SSG",
    "sinusoid"       : "SIN",
    "gaussian"       : "GSS",
    "bent_identity"  : "BID",
    "bipolar"        : "BIP",
    "bipolar_sigmoid": "BSG",
    "hard_tanh"      : "HTH",
    "absolute"       : "ABS",
    "inverse"        : "INV",
    "selu"           : "SLU",
    "softplus"       : "SPL"
    }

def register_activation(name: str,
                        function: Callable,
                        derivative: Callable | None = None,
                        code: str | None = None) -> Callable:
    """
    Add a custom activation function to the registry.

    'function' takes a single argument. If 'derivative' is not given, it is
    obtained by automatic differentiation, so 'function' must be written
    with autograd.numpy operations.

    Parameters:
        name:       Name under which the activation is registered (and serialized)
        function:   The activation, f(x)
        derivative: Its derivative, f'(x) (optional)
        code:       Short code used when drawing networks (optional)

    Returns:
        The registered squash function, with signature f(x, derivative=False)
    """
    if name in activations:
        raise ValueError(f"activation '{name}' is already registered")

    d_function = derivative if derivative is not None else grad(function)

    def squash(x, derivative=False):
        if derivative:
            return d_function(x)
        return function(x)

    squash.__name__ = f"{name}_activation"
    activations[name] = squash
    activation_codes[name] = code or name[:3].upper()
    return squash

def activation_name(function: Callable) -> str:
    """
    Return the registry name of an activation function.
    """
    for name, registered in activations.items():
        if registered is function:
            return name
    raise KeyError(f"activation {getattr(function, '__name__', function)!r} is not registered")
