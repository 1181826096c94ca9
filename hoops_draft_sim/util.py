"""Small numeric helpers used across the simulator."""
from __future__ import annotations

import math
from typing import Optional


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def nvl(x: Optional[float]) -> float:
    """Missing or non-finite stats count as zero."""
    if x is None or isinstance(x, bool):
        return 0.0
    x = float(x)
    return x if math.isfinite(x) else 0.0


def round_half_up(x: float) -> int:
    # Halves round toward +inf; stored recaps were produced with this rule.
    return int(math.floor(x + 0.5))
