"""Rounding helpers matching the half-up behaviour of the web client."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding up.

    Python's built-in ``round`` rounds halves to even, which would report
    12% for a score of 1/8 instead of 13%.
    """
    return math.floor(value + 0.5)
