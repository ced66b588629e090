"""
Monetary helpers.
All amounts are integers in minor currency units (cents).
"""
import math


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, ties going up.

    Python's round() uses banker's rounding (round(2.5) == 2), which would
    shift reward amounts by a cent on exact halves.
    """
    return int(math.floor(value + 0.5))


def prorate(amount: int, ratio: float) -> int:
    """Return amount scaled by ratio, capped at the full amount."""
    return round_half_up(amount * min(ratio, 1.0))


def average_per(total: int, count: int) -> int:
    """Average amount per head, 0 when there is nobody to divide by."""
    if count <= 0:
        return 0
    return round_half_up(total / count)
