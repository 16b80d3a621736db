"""
Quote, fundamentals and daily history for one ticker.

Quote and daily series are required; the company overview only enriches the
record. The three calls run concurrently and each outcome is checked on its
own, so a failed overview never blocks the other two.
"""
import asyncio
import logging
from datetime import datetime, timezone

from stockvoyant.analysis.history import build_historical_series
from stockvoyant.analysis.normalize import format_magnitude, parse_percent, safe_parse_number
from stockvoyant.config import Settings, get_settings
from stockvoyant.schemas.stock import NOT_AVAILABLE, StockData, StockDetails
from stockvoyant.services.alphavantage_service import AlphaVantageService
from stockvoyant.services.errors import (
    HistoryUnavailableError,
    InsightsError,
    MarketDataError,
    ProviderPremiumError,
    ProviderRateLimitError,
    QuoteUnavailableError,
)

logger = logging.getLogger(__name__)

# Provider conditions with their own user-facing message; other failures
# count as missing data
_RECOGNIZED = (ProviderRateLimitError, ProviderPremiumError)


def _last_updated(trading_day) -> str:
    """ISO timestamp for the quote's trading day, now when it can't be parsed."""
    if isinstance(trading_day, str) and trading_day.strip():
        try:
            return datetime.fromisoformat(trading_day.strip()).replace(tzinfo=timezone.utc).isoformat()
        except ValueError:
            pass
    return datetime.now(timezone.utc).isoformat()


def _or_not_available(value) -> float | str:
    number = safe_parse_number(value)
    return NOT_AVAILABLE if number is None else number


def _company_name(ticker: str, overview: dict) -> str:
    name = overview.get("Name")
    if isinstance(name, str) and name.strip() and name.strip().lower() != "none":
        return name.strip()
    return f"{ticker} (Name unavailable)"


def build_stock_data(ticker: str, quote: dict, overview: dict) -> StockData | None:
    """Assemble the quote record. None when the quote carries no usable price."""
    price = safe_parse_number(quote.get("05. price"))
    if price is None:
        return None

    return StockData(
        ticker=ticker,
        name=_company_name(ticker, overview),
        price=price,
        change=safe_parse_number(quote.get("09. change")),
        change_percent=parse_percent(quote.get("10. change percent")),
        market_cap=format_magnitude(overview.get("MarketCapitalization")),
        volume=format_magnitude(quote.get("06. volume")),
        pe_ratio=_or_not_available(overview.get("PERatio")),
        eps=_or_not_available(overview.get("EPS")),
        week52_high=safe_parse_number(overview.get("52WeekHigh")),
        week52_low=safe_parse_number(overview.get("52WeekLow")),
        previous_close=safe_parse_number(quote.get("08. previous close")),
        open_price=safe_parse_number(quote.get("02. open")),
        day_high=safe_parse_number(quote.get("03. high")),
        day_low=safe_parse_number(quote.get("04. low")),
        last_updated=_last_updated(quote.get("07. latest trading day")),
    )


class StockDataService:
    def __init__(self, settings: Settings | None = None, client: AlphaVantageService | None = None):
        self.settings = settings or get_settings()
        self.client = client or AlphaVantageService(self.settings)

    @property
    def is_configured(self) -> bool:
        return self.client.enabled

    async def fetch_stock_details(self, ticker: str) -> StockDetails:
        try:
            return await self._fetch(ticker)
        except InsightsError:
            raise
        except Exception as e:
            logger.error(f"Unexpected market data error for {ticker}: {e}")
            raise MarketDataError(f"Error fetching data for {ticker}: {e}") from e

    async def _fetch(self, ticker: str) -> StockDetails:
        quote, overview, series = await asyncio.gather(
            self.client.get_quote(ticker),
            self.client.get_company_overview(ticker),
            self.client.get_daily_series(ticker, self.settings.alpha_vantage_outputsize),
            return_exceptions=True,
        )

        if isinstance(quote, _RECOGNIZED):
            raise quote
        if isinstance(quote, Exception):
            logger.error(f"Quote request failed for {ticker}: {quote}")
            quote = None
        if not isinstance(quote, dict) or not quote:
            raise QuoteUnavailableError(
                f"No current quote data found for {ticker}. The symbol may be invalid or delisted."
            )

        if isinstance(overview, Exception) or not isinstance(overview, dict):
            logger.warning(f"Company overview unavailable for {ticker}: {overview}")
            overview = {}
        elif not overview:
            logger.info(f"Empty company overview for {ticker}")

        if isinstance(series, _RECOGNIZED):
            raise series
        if isinstance(series, Exception):
            logger.error(f"Daily series request failed for {ticker}: {series}")
            series = None
        if not isinstance(series, dict) or not series:
            raise HistoryUnavailableError(f"No historical data found for {ticker}.")

        stock_data = build_stock_data(ticker, quote, overview)
        if stock_data is None:
            raise QuoteUnavailableError(f"No current quote data found for {ticker}: price missing from quote.")

        history = build_historical_series(series, limit=self.settings.history_limit, ticker=ticker)
        return StockDetails(stock_data=stock_data, historical_data=history)
