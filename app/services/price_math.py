from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

_CENT = Decimal("0.01")


def round2(value: float | Decimal) -> float:
    """Round half away from zero to two decimals."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return float(value.quantize(_CENT, rounding=ROUND_HALF_UP))


def change_and_percent(price: float, previous_close: float) -> tuple[float, float]:
    if previous_close == 0:
        raise ZeroDivisionError("previous_close must be non-zero")
    diff = Decimal(str(price)) - Decimal(str(previous_close))
    change = round2(diff)
    change_pct = round2(diff / Decimal(str(previous_close)) * 100)
    return change, change_pct


def utc_timestamp(now: datetime | None = None) -> str:
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    current = current.astimezone(timezone.utc)
    return current.isoformat(timespec="milliseconds").replace("+00:00", "Z")
