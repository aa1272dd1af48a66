from __future__ import annotations

import random
from datetime import datetime
from typing import Callable

from app.schemas.quote import Quote
from app.services.market_hours import is_market_open
from app.services.price_math import change_and_percent, round2, utc_timestamp

# First matching fragment wins, so "HDFCBANK" resolves through "BANK".
BASE_PRICES: tuple[tuple[str, float], ...] = (
    ("NSEI", 25000.0),
    ("BSESN", 82000.0),
    ("BANK", 52000.0),
    ("RELIANCE", 2800.0),
    ("TCS", 4200.0),
    ("HDFC", 1800.0),
)
DEFAULT_BASE_PRICE = 1000.0
MAX_VARIATION = 0.01
MAX_DEMO_VOLUME = 10_000_000


def base_price_for(symbol: str) -> float:
    upper = symbol.upper()
    for fragment, price in BASE_PRICES:
        if fragment in upper:
            return price
    return DEFAULT_BASE_PRICE


def synthesize_quote(
    symbol: str,
    rng: random.Random | None = None,
    now: datetime | None = None,
    market_open_checker: Callable[[], bool] | None = None,
) -> Quote:
    """Build a demo quote within +/-1% of a fixed per-symbol base price."""
    rng = rng or random.Random()
    checker = market_open_checker or is_market_open

    base_price = base_price_for(symbol)
    variation = (rng.random() - 0.5) * 2 * MAX_VARIATION
    price = round2(base_price * (1 + variation))
    previous_close = round2(base_price)
    change, change_pct = change_and_percent(price, previous_close)

    return Quote(
        price=price,
        previous_close=previous_close,
        change=change,
        change_percent=change_pct,
        day_high=round2(price * 1.01),
        day_low=round2(price * 0.99),
        volume=rng.randrange(MAX_DEMO_VOLUME),
        market_state="REGULAR" if checker() else "CLOSED",
        currency="INR",
        symbol=symbol,
        timestamp=utc_timestamp(now),
        is_demo=True,
    )
