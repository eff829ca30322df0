"""Numeric helpers shared by the metrics, scoring and analytics code."""

import math
from typing import List, Union


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, with halves rounded up.

    Python's built-in ``round`` uses banker's rounding, which would turn
    86.5 into 86. Scores and WPM figures always round halves upwards.

    Args:
        value: The number to round

    Returns:
        The rounded integer

    Example:
        >>> round_half_up(87.5)
        88
        >>> round_half_up(86.5)
        87
        >>> round_half_up(66.666)
        67
    """
    return int(math.floor(value + 0.5))


def calculate_average(numbers: List[Union[int, float]]) -> float:
    """
    Calculate the average of a list of numbers.

    Args:
        numbers: A list of numbers to average

    Returns:
        The arithmetic mean of the numbers

    Raises:
        ValueError: If the list is empty

    Example:
        >>> calculate_average([1, 2, 3, 4, 5])
        3.0
    """
    if not numbers:
        raise ValueError("Cannot calculate average of an empty list")

    return sum(numbers) / len(numbers)


def clamp(value: int, lower: int, upper: int) -> int:
    """Clamp ``value`` into ``[lower, upper]``."""
    return max(lower, min(value, upper))
