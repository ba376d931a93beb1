from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

_CENT = Decimal("0.01")


def round2(value: float) -> float:
    """Round half-up to 2 decimals (Python's round() is half-even)."""
    return float(Decimal(repr(float(value))).quantize(_CENT, rounding=ROUND_HALF_UP))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
