class QuoteServiceError(Exception):
    pass


class QuoteSymbolRequiredError(QuoteServiceError, ValueError):
    pass
