"""
Numerical helpers shared by the tableau engine.

Every "is this effectively zero / positive / negative" decision in the engine
goes through these helpers so that a single tolerance governs the whole
solver.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import torch

EPSILON = 1e-8


def is_zero(value: float, eps: float = EPSILON) -> bool:
    """Return True if ``|value| < eps``."""
    return abs(value) < eps


def is_positive(value: float, eps: float = EPSILON) -> bool:
    """Return True if ``value`` is positive and not within ``eps`` of zero."""
    return value > 0 and not is_zero(value, eps)


def is_negative(value: float, eps: float = EPSILON) -> bool:
    """Return True if ``value`` is negative and not within ``eps`` of zero."""
    return value < 0 and not is_zero(value, eps)


def as_float_array(data: Any) -> np.ndarray:
    """
    Convert ``data`` into a freshly allocated float64 array.

    Torch tensors are detached and moved to the CPU first, so problems can be
    assembled directly from model outputs. The result never aliases the input.
    """

    if isinstance(data, torch.Tensor):
        data = data.detach().cpu().numpy()
    return np.array(data, dtype=float, copy=True)


__all__ = ["EPSILON", "is_zero", "is_positive", "is_negative", "as_float_array"]
