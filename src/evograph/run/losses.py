"""
Loss Functions Module.

Every loss takes the targets and the outputs of one example and returns a
scalar; smaller is better.

Exported:
    losses:   Dictionary mapping loss names to functions
    get_loss: Resolve a loss given by name (or pass a callable through)
"""

import numpy as np
from typing import Callable, Sequence

_EPSILON = 1e-15

def mse_loss(targets: Sequence[float], outputs: Sequence[float]) -> float:
    """Mean squared error."""
    t, o = np.asarray(targets, dtype=float), np.asarray(outputs, dtype=float)
    return float(np.mean((t - o) ** 2))

def mbe_loss(targets: Sequence[float], outputs: Sequence[float]) -> float:
    """Mean bias error."""
    t, o = np.asarray(targets, dtype=float), np.asarray(outputs, dtype=float)
    return float(np.mean(t - o))

def binary_loss(targets: Sequence[float], outputs: Sequence[float]) -> float:
    """Fraction of outputs that round to a different class than the target."""
    t, o = np.asarray(targets, dtype=float), np.asarray(outputs, dtype=float)
    return float(np.mean(np.floor(t * 2 + 0.5) != np.floor(o * 2 + 0.5)))

def mae_loss(targets: Sequence[float], outputs: Sequence[float]) -> float:
    """Mean absolute error."""
    t, o = np.asarray(targets, dtype=float), np.asarray(outputs, dtype=float)
    return float(np.mean(np.abs(t - o)))

def mape_loss(targets: Sequence[float], outputs: Sequence[float]) -> float:
    """Mean absolute percentage error."""
    t, o = np.asarray(targets, dtype=float), np.asarray(outputs, dtype=float)
    return float(np.mean(np.abs((o - t) / np.maximum(t, _EPSILON))))

def wape_loss(targets: Sequence[float], outputs: Sequence[float]) -> float:
    """Weighted absolute percentage error."""
    t, o = np.asarray(targets, dtype=float), np.asarray(outputs, dtype=float)
    return float(np.sum(np.abs(t - o)) / np.sum(t))

def msle_loss(targets: Sequence[float], outputs: Sequence[float]) -> float:
    """Mean squared logarithmic error."""
    t, o = np.asarray(targets, dtype=float), np.asarray(outputs, dtype=float)
    return float(np.mean((np.log(np.maximum(t, _EPSILON)) - np.log(np.maximum(o, _EPSILON))) ** 2))

def hinge_loss(targets: Sequence[float], outputs: Sequence[float]) -> float:
    """Hinge loss, for targets in {-1, 1}."""
    t, o = np.asarray(targets, dtype=float), np.asarray(outputs, dtype=float)
    return float(np.mean(np.maximum(0.0, 1.0 - t * o)))

losses = {
    "MSE"   : mse_loss,
    "MBE"   : mbe_loss,
    "Binary": binary_loss,
    "MAE"   : mae_loss,
    "MAPE"  : mape_loss,
    "WAPE"  : wape_loss,
    "MSLE"  : msle_loss,
    "Hinge" : hinge_loss
    }

def get_loss(loss: str | Callable) -> Callable:
    """
    Return the loss function named 'loss' (case insensitive).
    A callable is returned unchanged.
    """
    if callable(loss):
        return loss
    for name, function in losses.items():
        if name.lower() == str(loss).lower():
            return function
    raise KeyError(f"unknown loss '{loss}', expected one of {list(losses.keys())}")
