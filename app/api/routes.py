import threading

from fastapi import APIRouter, HTTPException, Request

from app.errors import QuoteSymbolRequiredError

router = APIRouter()

_service_lock = threading.Lock()


def _quote_service(request: Request):
    state = request.app.state
    service = getattr(state, 'quote_service', None)
    if service is not None:
        return service
    with _service_lock:
        if getattr(state, 'quote_service', None) is None:
            state.quote_service = state.build_quote_service(state.get_settings())
        return state.quote_service


@router.get('/quote')
def get_quote(request: Request, symbol: str | None = None):
    if not symbol or not symbol.strip():
        raise HTTPException(status_code=400, detail='Symbol parameter is required')

    service = _quote_service(request)
    try:
        quote = service.get_quote(symbol)
    except QuoteSymbolRequiredError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return quote.to_payload()


@router.get('/metrics/quote')
def quote_metrics(request: Request):
    return _quote_service(request).metrics()
