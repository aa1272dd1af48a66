from __future__ import annotations

import time
from typing import Callable

from app.schemas.quote import Quote


class QuoteCache:
    """Per-process quote store; entries older than ``ttl_sec`` read as missing."""

    def __init__(self, ttl_sec: float = 30.0, clock: Callable[[], float] | None = None) -> None:
        self.ttl_sec = ttl_sec
        self.clock = clock or time.time
        self._rows: dict[str, tuple[Quote, float]] = {}

    @staticmethod
    def key_for(symbol: str) -> str:
        return symbol.upper()

    def upsert(self, symbol: str, quote: Quote) -> None:
        self._rows[self.key_for(symbol)] = (quote, self.clock())

    def get(self, symbol: str) -> Quote | None:
        row = self._rows.get(self.key_for(symbol))
        if row is None:
            return None
        quote, stored_at = row
        if self.clock() - stored_at < self.ttl_sec:
            return quote
        return None

    def clear(self) -> None:
        self._rows.clear()

    def __len__(self) -> int:
        return len(self._rows)
