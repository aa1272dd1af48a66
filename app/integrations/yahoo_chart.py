from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Sequence
from urllib.parse import quote

import requests

from app.schemas.quote import Quote
from app.services.price_math import change_and_percent, round2, utc_timestamp

BROWSER_HEADERS: Dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    ),
    "Accept": "application/json, text/plain, */*",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate, br",
    "Connection": "keep-alive",
    "Referer": "https://finance.yahoo.com/",
}

DEFAULT_URL_TEMPLATES = (
    "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}",
    "https://query2.finance.yahoo.com/v8/finance/chart/{symbol}",
    "https://finance.yahoo.com/chart/{symbol}",
)

# Index symbols keep their caret; path and query delimiters are escaped.
SYMBOL_SAFE_CHARS = "^.=-"


@dataclass(frozen=True)
class UpstreamEndpoint:
    url_template: str
    headers: Dict[str, str] = field(default_factory=lambda: dict(BROWSER_HEADERS))

    def url_for(self, symbol: str) -> str:
        return self.url_template.format(symbol=quote(symbol, safe=SYMBOL_SAFE_CHARS))


def default_endpoints(url_templates: Sequence[str] = DEFAULT_URL_TEMPLATES) -> list[UpstreamEndpoint]:
    return [UpstreamEndpoint(url_template=t) for t in url_templates]


def _to_float(value: Any) -> Optional[float]:
    try:
        if value is None or value == "":
            return None
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _extract_meta(payload: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(payload, dict):
        return None
    chart = payload.get("chart")
    if not isinstance(chart, dict):
        return None
    results = chart.get("result")
    if not isinstance(results, list) or not results:
        return None
    first = results[0]
    if not isinstance(first, dict):
        return None
    meta = first.get("meta")
    return meta if isinstance(meta, dict) else None


def normalize_chart_payload(
    payload: Any,
    symbol: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Optional[Quote]:
    """Map a Yahoo v8 chart response onto a Quote.

    Returns None when the chart/result/meta structure is missing, when no
    positive price is reported, or when the previous close is absent or zero.
    Missing values fall back the same way a falsy upstream value does, so a
    reported ``0`` day high is treated like an absent one. Values that cannot
    be rounded or validated also yield None.
    """
    meta = _extract_meta(payload)
    if meta is None:
        return None

    try:
        return _quote_from_meta(meta, symbol, now)
    except (ArithmeticError, ValueError):
        return None


def _quote_from_meta(meta: Dict[str, Any], symbol: Optional[str], now: Optional[datetime]) -> Optional[Quote]:
    raw_price = _to_float(meta.get("regularMarketPrice")) or _to_float(
        meta.get("previousClose")
    )
    if not raw_price or raw_price <= 0:
        return None

    raw_prev = _to_float(meta.get("previousClose")) or _to_float(
        meta.get("chartPreviousClose")
    )
    if not raw_prev:
        return None

    price = round2(raw_price)
    previous_close = round2(raw_prev)
    if price <= 0 or previous_close == 0:
        return None
    change, change_pct = change_and_percent(price, previous_close)

    day_high = _to_float(meta.get("regularMarketDayHigh")) or raw_price
    day_low = _to_float(meta.get("regularMarketDayLow")) or raw_price
    volume = _to_float(meta.get("regularMarketVolume")) or 0.0

    return Quote(
        price=price,
        previous_close=previous_close,
        change=change,
        change_percent=change_pct,
        day_high=round2(day_high),
        day_low=round2(day_low),
        volume=max(int(volume), 0),
        market_state=str(meta.get("marketState") or "UNKNOWN"),
        currency=str(meta.get("currency") or "INR"),
        symbol=str(meta.get("symbol") or symbol or ""),
        timestamp=utc_timestamp(now),
    )


class YahooChartClient:
    """Tries each chart mirror in order; the first normalizable payload wins.

    ``timeout`` bounds the whole attempt against one mirror, body included.
    ``requests`` only applies it per socket operation, so the request runs on
    a worker thread and the caller stops waiting once the deadline passes.
    An abandoned request keeps its worker until the socket gives up.
    """

    def __init__(
        self,
        endpoints: Optional[Sequence[UpstreamEndpoint]] = None,
        timeout: float = 8.0,
        session: Optional[Any] = None,
        max_workers: int = 8,
    ) -> None:
        self.endpoints = list(endpoints) if endpoints is not None else default_endpoints()
        self.timeout = timeout
        self.session = session or requests
        self.endpoint_failures = 0
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="quote-upstream")

    def _request_json(self, url: str, headers: Dict[str, str]) -> Any:
        response = self.session.get(url, headers=headers, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def _get_json(self, url: str, headers: Dict[str, str]) -> Any:
        future = self._executor.submit(self._request_json, url, headers)
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeoutError as exc:
            future.cancel()
            raise requests.Timeout(f"no complete response within {self.timeout}s") from exc

    def fetch_quote(self, symbol: str) -> Optional[Quote]:
        for endpoint in self.endpoints:
            url = endpoint.url_template
            try:
                url = endpoint.url_for(symbol)
                payload = self._get_json(url, endpoint.headers)
            except (requests.RequestException, ValueError, KeyError, IndexError) as exc:
                self.endpoint_failures += 1
                print(f"[QUOTE][endpoint_failed] symbol={symbol} url={url} error={exc}", flush=True)
                continue

            quote = normalize_chart_payload(payload, symbol=symbol)
            if quote is None:
                self.endpoint_failures += 1
                print(f"[QUOTE][endpoint_unparseable] symbol={symbol} url={url}", flush=True)
                continue

            print(f"[QUOTE][endpoint_success] symbol={symbol} url={url}", flush=True)
            return quote
        return None
