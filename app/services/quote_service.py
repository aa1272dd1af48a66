from __future__ import annotations

import random
from typing import Callable

from app.errors import QuoteSymbolRequiredError
from app.schemas.quote import Quote
from app.services.demo_quote import synthesize_quote
from app.services.market_hours import is_market_open
from app.services.quote_cache import QuoteCache


class QuoteService:
    """Cache-first quote lookup with live fetch and demo-data fallback.

    Concurrent misses for one symbol are not coalesced; each may reach the
    upstream and the last cache write wins.
    """

    def __init__(
        self,
        *,
        quote_cache: QuoteCache,
        live_client,
        market_open_checker: Callable[[], bool] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.quote_cache = quote_cache
        self.live_client = live_client
        self.market_open_checker = market_open_checker or is_market_open
        self.rng = rng or random.Random()

        self.requests = 0
        self.cache_hits = 0
        self.live_hits = 0
        self.demo_fallbacks = 0
        self.errors = 0

    def _synthesize(self, symbol: str) -> Quote:
        return synthesize_quote(
            symbol,
            rng=self.rng,
            market_open_checker=self.market_open_checker,
        )

    def get_quote(self, symbol: str) -> Quote:
        symbol = (symbol or "").strip()
        if not symbol:
            raise QuoteSymbolRequiredError("Symbol parameter is required")

        self.requests += 1
        try:
            cached = self.quote_cache.get(symbol)
            if cached is not None:
                self.cache_hits += 1
                print(f"[QUOTE][cache_hit] symbol={symbol}", flush=True)
                return cached.model_copy(update={"from_cache": True})

            print(f"[QUOTE][live_fetch] symbol={symbol}", flush=True)
            live = self.live_client.fetch_quote(symbol)
            if live is not None:
                self.quote_cache.upsert(symbol, live)
                self.live_hits += 1
                return live

            print(f"[QUOTE][demo_fallback] symbol={symbol}", flush=True)
            demo = self._synthesize(symbol)
            self.quote_cache.upsert(symbol, demo)
            self.demo_fallbacks += 1
            return demo
        except Exception as exc:
            self.errors += 1
            print(f"[QUOTE][error] symbol={symbol} error={exc}", flush=True)
            return self._synthesize(symbol)

    def metrics(self) -> dict[str, int]:
        return {
            "requests": self.requests,
            "cache_hits": self.cache_hits,
            "live_hits": self.live_hits,
            "demo_fallbacks": self.demo_fallbacks,
            "errors": self.errors,
            "endpoint_failures": int(getattr(self.live_client, "endpoint_failures", 0)),
            "cached_symbols": len(self.quote_cache),
        }
