"""Checks for values coming in through the configuration surface."""

from __future__ import annotations

import math


def check_config_value(name: str, value: float, *, positive: bool = False) -> float:
    """
    Return ``value`` as a float if it is finite and non-negative.

    With ``positive=True`` zero is rejected as well.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None

    if not math.isfinite(number):
        raise ValueError(f"{name} must be finite, got {value!r}")
    if positive and number <= 0.0:
        raise ValueError(f"{name} must be > 0, got {value!r}")
    if number < 0.0:
        raise ValueError(f"{name} must be >= 0, got {value!r}")
    return number
