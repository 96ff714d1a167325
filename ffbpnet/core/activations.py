"""Activation utilities for ffbpnet."""

from __future__ import annotations

import numpy as np

from .types import Array


def sigmoid(x: Array) -> Array:
    """Return the logistic sigmoid ``1 / (1 + exp(-x))``.

    Very negative inputs overflow ``exp`` and saturate to ``0.0``; that is the
    expected result so the overflow warning is silenced.
    """

    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-x))


def sigmoid_deriv(fire: Array) -> Array:
    """Derivative of the sigmoid expressed through its output ``fire``."""

    return fire * (1.0 - fire)
