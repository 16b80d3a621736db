"""Failures that abort an insights request, plus AI collaborator failures."""


class InsightsError(Exception):
    """Base for hard failures; the message is shown to the user as-is."""


class UnsupportedTickerError(InsightsError):
    pass


class QuoteUnavailableError(InsightsError):
    pass


class HistoryUnavailableError(InsightsError):
    pass


class MarketDataError(InsightsError):
    pass


class ProviderError(InsightsError):
    """An upstream provider reported a condition it recognizes."""

    def __init__(self, message: str, provider: str = "", detail: str = ""):
        super().__init__(message)
        self.provider = provider
        self.detail = detail


class ProviderRateLimitError(ProviderError):
    pass


class ProviderPremiumError(ProviderError):
    """Premium-only endpoint or an invalid symbol."""


class AIServiceError(Exception):
    pass
