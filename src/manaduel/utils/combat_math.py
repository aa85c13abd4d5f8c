from __future__ import annotations

import math

from manaduel.constants import (
    COMBO_STEP_MULTIPLIER,
    LENGTH_MULTIPLIERS,
    LONG_MATCH_MULTIPLIER,
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def length_multiplier(length: int) -> float:
    if length >= 5:
        return LONG_MATCH_MULTIPLIER
    return LENGTH_MULTIPLIERS.get(length, 1.0)


def combo_multiplier(combo: int) -> float:
    if combo <= 1:
        return 1.0
    return 1 + (combo - 1) * COMBO_STEP_MULTIPLIER


def split_conversion(amount: int, ratio: int) -> tuple[int, int]:
    """Split ``amount`` into (converted, remainder) units for a conversion ratio."""
    if ratio <= 0:
        raise ValueError("conversion ratio must be positive")
    return amount // ratio, amount % ratio
