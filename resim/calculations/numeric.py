"""
Numeric helpers shared by the calculation modules.
"""

import math


def ieee_divide(numerator: float, denominator: float) -> float:
    """Divide, returning inf/-inf/nan for a zero denominator instead of raising."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return float("nan")
        return math.copysign(float("inf"), numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def round_half_up(value: float, ndigits: int = 0):
    """
    Round halves toward +infinity (2.5 -> 3, -2.5 -> -2).

    Python's round() uses banker's rounding, which would shift some
    whole-unit outputs by one. Non-finite values are returned unchanged.
    Returns an int when ndigits is 0.
    """
    if not math.isfinite(value):
        return value
    if ndigits == 0:
        return math.floor(value + 0.5)
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def floor_at_zero(value: float) -> float:
    """max(0, value) that lets NaN through instead of returning 0."""
    if math.isnan(value):
        return value
    return max(0.0, value)
