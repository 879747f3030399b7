"""Shared math utilities."""


def clamp01(value):
    """Clamp a number into [0, 1]."""
    return max(0.0, min(1.0, value))


def normalize(value, lo, hi):
    """Map value onto [0, 1] linearly between lo and hi, clamping outside.

    Returns 0 for a degenerate range (hi <= lo).
    """
    if hi <= lo:
        return 0.0
    return clamp01((value - lo) / (hi - lo))


def safe_ratio(numerator, denominator):
    """numerator / denominator, or 0 when the denominator is 0."""
    if not denominator:
        return 0.0
    return numerator / denominator
