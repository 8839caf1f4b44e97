"""Rounding shared by every reported value."""

from __future__ import annotations

import math


def round_half_up(value: float, digits: int = 2) -> float:
    """Round to ``digits`` decimals with exact halves going up.

    ``round()`` sends halves to the even neighbour (22.125 -> 22.12); reported
    values use half-up instead (22.125 -> 22.13).
    """

    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def round_channel(value: float) -> int:
    """Round a colour channel to the nearest integer, halves up."""

    return int(math.floor(value + 0.5))
