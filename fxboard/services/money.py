"""Money / rounding helpers.

Centralized so the converter view, rate labels and trend summary use identical
rounding semantics (ROUND_HALF_UP on the decimal representation of the float).
"""

from __future__ import annotations

import math
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Optional, Union

Number = Union[str, int, float]

# Enough digits for any finite float (max ~1.8e308) plus the fractional places.
_QUANTIZE_PRECISION = 400


def quantize_str(value: float, places: int) -> str:
    """Format ``value`` with exactly ``places`` decimals, e.g. (0.92, 6) -> '0.920000'.

    Raises ValueError for inf / nan; callers decide what placeholder to show.
    """
    if not math.isfinite(value):
        raise ValueError(f"cannot format non-finite value {value!r}")
    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        ctx.prec = _QUANTIZE_PRECISION
        return str(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def parse_amount(raw: Optional[Number]) -> Optional[float]:
    """Parse a user-entered amount; None unless it is a finite number >= 0."""
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(str(raw).strip())
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    # "-0" passes the sign check; fold it to 0.0
    return abs(value)
