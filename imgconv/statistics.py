from __future__ import annotations

import math
from typing import Sequence


def mean(values: Sequence[float]) -> float:
    """
    Arithmetic mean of a sequence of numbers.
    mean([2, 4, 4, 4, 5, 5, 7, 9]) == 5
    """
    if not values:
        raise ValueError("Cannot average an empty sequence")
    return sum(values) / len(values)


average = mean


def standard_deviation(values: Sequence[float]) -> float:
    """
    Population standard deviation: square root of the mean squared
    deviation from the mean.
    standard_deviation([2, 4, 4, 4, 5, 5, 7, 9]) == 2
    """
    center = mean(values)
    deviations = [(value - center) ** 2 for value in values]
    return math.sqrt(mean(deviations))
