"""
Alpha Vantage client: global quote, company overview and daily series.

Alpha Vantage answers most failures with HTTP 200 and a JSON body carrying
one of these keys instead of data:
  "Error Message"  invalid call, typically an unknown symbol
  "Note"           call frequency exceeded
  "Information"    free text, either a rate limit or a premium-only endpoint
The first two are unambiguous. "Information" has no structured code, so it
is classified by wording.
"""
import logging

import httpx

from stockvoyant.config import Settings, get_settings
from stockvoyant.services.errors import ProviderError, ProviderPremiumError, ProviderRateLimitError

logger = logging.getLogger(__name__)

PROVIDER = "Alpha Vantage"

_RATE_LIMIT_PHRASES = ("rate limit", "call frequency", "requests per day", "requests per minute")
_PREMIUM_PHRASES = ("premium", "invalid api call")


def classify_provider_message(data: dict) -> ProviderError | None:
    """Map an Alpha Vantage error body to a typed error, or None for a data payload."""
    if not isinstance(data, dict):
        return None
    if "Error Message" in data:
        detail = str(data["Error Message"])
        return ProviderPremiumError(f"{PROVIDER} rejected the request", PROVIDER, detail)
    if "Note" in data:
        detail = str(data["Note"])
        return ProviderRateLimitError(f"{PROVIDER} rate limit reached", PROVIDER, detail)
    if "Information" in data:
        detail = str(data["Information"])
        lowered = detail.lower()
        if any(p in lowered for p in _RATE_LIMIT_PHRASES):
            return ProviderRateLimitError(f"{PROVIDER} rate limit reached", PROVIDER, detail)
        if any(p in lowered for p in _PREMIUM_PHRASES):
            return ProviderPremiumError(f"{PROVIDER} premium endpoint", PROVIDER, detail)
        return ProviderError(f"{PROVIDER}: {detail}", PROVIDER, detail)
    return None


class AlphaVantageService:
    BASE_URL = "https://www.alphavantage.co/query"

    def __init__(self, settings: Settings | None = None):
        settings = settings or get_settings()
        self.api_key = settings.alpha_vantage_api_key
        self.timeout = settings.http_timeout
        self.enabled = bool(self.api_key)

    async def _get(self, function: str, symbol: str, **params) -> dict:
        query = {"function": function, "symbol": symbol, "apikey": self.api_key, **params}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.get(self.BASE_URL, params=query)
        if resp.status_code == 429:
            raise ProviderRateLimitError(f"{PROVIDER} rate limit reached", PROVIDER, "HTTP 429")
        if resp.status_code != 200:
            logger.warning(f"{PROVIDER} {function} returned {resp.status_code} for {symbol}")
            raise ProviderError(f"{PROVIDER} {function} returned HTTP {resp.status_code}", PROVIDER)

        data = resp.json()
        error = classify_provider_message(data)
        if error is not None:
            logger.warning(f"{PROVIDER} {function} for {symbol}: {error.detail}")
            raise error
        return data

    async def get_quote(self, symbol: str) -> dict:
        """Contents of the "Global Quote" object; empty dict when the symbol is unknown."""
        data = await self._get("GLOBAL_QUOTE", symbol)
        return data.get("Global Quote") or {}

    async def get_company_overview(self, symbol: str) -> dict:
        return await self._get("OVERVIEW", symbol)

    async def get_daily_series(self, symbol: str, outputsize: str = "compact") -> dict:
        """Date -> OHLCV mapping from the adjusted daily series."""
        data = await self._get("TIME_SERIES_DAILY_ADJUSTED", symbol, outputsize=outputsize)
        return data.get("Time Series (Daily)") or {}
