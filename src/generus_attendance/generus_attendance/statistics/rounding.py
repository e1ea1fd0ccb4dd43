"""The one rounding rule for every figure shown on dashboards and detail views."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value, places: int = 0) -> Decimal:
    quantum = Decimal(1).scaleb(-places)
    return Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)


def percentage(part: int, total: int) -> int:
    """``part / total * 100`` rounded half-up to an integer; 0 when ``total`` is 0."""

    if not total:
        return 0
    return int((Decimal(int(part)) * 100 / Decimal(int(total))).quantize(Decimal(1), rounding=ROUND_HALF_UP))
