"""
WiFi Optimizer Mathematical Utilities
======================================

Small NumPy-backed numeric helpers shared by the analyzers: clamping,
linear range normalisation and a mean that is zero for empty input.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.typing import NDArray


# ---------------------------------------------------------------------------
#  Type aliases for readability
# ---------------------------------------------------------------------------
FloatArray = NDArray[np.floating]


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp *value* into the closed interval ``[lower, upper]``."""
    return float(np.clip(value, lower, upper))


def linear_normalize(value: float, lower: float, upper: float) -> float:
    """Map *value* linearly from ``[lower, upper]`` onto ``[0, 1]``.

    Values outside the range are clamped first, so the result is always
    within ``[0, 1]``.

    Args:
        value: Input value.
        lower: Value mapped to 0.
        upper: Value mapped to 1. Must differ from *lower*.

    Returns:
        Normalised value in ``[0, 1]``.

    Raises:
        ValueError: If *lower* equals *upper*.
    """
    if upper == lower:
        raise ValueError("Normalisation range must not be empty")
    clipped = np.clip(value, min(lower, upper), max(lower, upper))
    return float((clipped - lower) / (upper - lower))


def mean_or_zero(values: Sequence[float] | FloatArray) -> float:
    """Arithmetic mean of *values*, or ``0.0`` for an empty sequence."""
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        return 0.0
    return float(arr.mean())
