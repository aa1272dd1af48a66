from __future__ import annotations

from fastapi import FastAPI

from app.api.routes import router
from app.config.settings import Settings, get_settings
from app.integrations.yahoo_chart import YahooChartClient, default_endpoints
from app.services.quote_cache import QuoteCache
from app.services.quote_service import QuoteService


def build_quote_service(settings: Settings) -> QuoteService:
    live_client = YahooChartClient(
        endpoints=default_endpoints(settings.QUOTE_UPSTREAM_ENDPOINTS),
        timeout=settings.QUOTE_UPSTREAM_TIMEOUT_SEC,
    )
    return QuoteService(
        quote_cache=QuoteCache(ttl_sec=settings.QUOTE_CACHE_TTL_SEC),
        live_client=live_client,
    )


app = FastAPI(title="Market Quote Service", version="0.1.0")
app.include_router(router)

# NOTE: built on first request so app import does not read env.
app.state.get_settings = get_settings
app.state.build_quote_service = build_quote_service
app.state.quote_service = None
