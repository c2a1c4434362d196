"""Numeric helpers shared by the detectors."""

import math


def mean_std(values: list[float]) -> tuple[float, float]:
    """Population mean and population standard deviation.

    Returns (0.0, 0.0) for an empty list.
    """
    if not values:
        return 0.0, 0.0
    mean = sum(values) / len(values)
    ssq = sum((x - mean) ** 2 for x in values)
    return mean, math.sqrt(ssq / len(values))


def round_half_away(x: float) -> float:
    """Round to the nearest integer, halves away from zero."""
    t = math.trunc(x)
    if abs(x - t) >= 0.5:
        t += math.copysign(1, x)
    return float(t)


def round2(x: float) -> float:
    """Round half away from zero to two decimals."""
    return round_half_away(x * 100) / 100


def saturating_confidence(x: float, scale: float) -> float:
    """Map a non-negative score onto [0, 1] via ``1 - e^(-x/scale)``, rounded to 2 decimals."""
    conf = 1 - math.exp(-x / scale)
    return round2(min(1.0, max(0.0, conf)))


def format_number(x: float) -> str:
    """Shortest plain rendering of a 2-decimal value (20.0 -> '20', 17.50 -> '17.5')."""
    text = f'{x:.2f}'.rstrip('0').rstrip('.')
    return '0' if text == '-0' else text
