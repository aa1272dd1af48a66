from __future__ import annotations

from datetime import datetime, time
from zoneinfo import ZoneInfo

IST = ZoneInfo("Asia/Kolkata")
MARKET_OPEN_TIME = time(9, 15)
MARKET_CLOSE_TIME = time(15, 30)


def _minute_of_day(value: time) -> int:
    return value.hour * 60 + value.minute


def is_market_open(now: datetime | None = None) -> bool:
    """Return whether the NSE cash session is open in Asia/Kolkata time.

    Weekends are closed; exchange holidays are not modelled. The window is
    compared at minute resolution, both ends inclusive.
    """
    current = now or datetime.now(IST)

    if current.tzinfo is None:
        ist_now = current.replace(tzinfo=IST)
    else:
        ist_now = current.astimezone(IST)

    if ist_now.weekday() >= 5:
        return False

    minute = _minute_of_day(ist_now.time())
    return _minute_of_day(MARKET_OPEN_TIME) <= minute <= _minute_of_day(MARKET_CLOSE_TIME)
