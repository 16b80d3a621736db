"""Pytest configuration and fixtures."""

from datetime import date, datetime, timedelta, timezone

import pytest

from stockvoyant.config import Settings
from stockvoyant.schemas.news import NewsArticle


def make_settings(**overrides) -> Settings:
    """Settings isolated from the environment and any .env file."""
    values = {
        "alpha_vantage_api_key": "",
        "newsapi_key": "",
        "openai_api_key": "",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_daily_series(days: int, end: date | None = None, start_price: float = 100.0) -> dict:
    """Alpha Vantage style "Time Series (Daily)" mapping, newest first like the API."""
    end = end or date.today()
    series = {}
    for i in range(days):
        day = end - timedelta(days=i)
        close = start_price + (days - i) * 0.1
        series[day.isoformat()] = {
            "1. open": f"{close - 0.5:.4f}",
            "2. high": f"{close + 1:.4f}",
            "3. low": f"{close - 1:.4f}",
            "4. close": f"{close:.4f}",
            "5. adjusted close": f"{close:.4f}",
            "6. volume": "1000000",
        }
    return series


AAPL_QUOTE = {
    "01. symbol": "AAPL",
    "02. open": "169.50",
    "03. high": "171.00",
    "04. low": "168.90",
    "05. price": "170.34",
    "06. volume": "50200000",
    "07. latest trading day": "2024-05-10",
    "08. previous close": "169.11",
    "09. change": "1.23",
    "10. change percent": "0.72%",
}

AAPL_OVERVIEW = {
    "Symbol": "AAPL",
    "Name": "Apple Inc.",
    "MarketCapitalization": "2620000000000",
    "PERatio": "26.5",
    "EPS": "6.43",
    "52WeekHigh": "199.62",
    "52WeekLow": "164.08",
}


class FakeAlphaVantage:
    """Stands in for AlphaVantageService; values that are exceptions get raised."""

    def __init__(self, quote=None, overview=None, series=None, enabled=True):
        self.quote = quote if quote is not None else {}
        self.overview = overview if overview is not None else {}
        self.series = series if series is not None else {}
        self.enabled = enabled
        self.calls = []

    async def _respond(self, name, value):
        self.calls.append(name)
        if isinstance(value, Exception):
            raise value
        return value

    async def get_quote(self, symbol):
        return await self._respond("quote", self.quote)

    async def get_company_overview(self, symbol):
        return await self._respond("overview", self.overview)

    async def get_daily_series(self, symbol, outputsize="compact"):
        return await self._respond("series", self.series)


class FakeNews:
    def __init__(self, articles=None):
        self.articles = articles or []
        self.calls = []

    async def fetch_news(self, company_name, ticker):
        self.calls.append((company_name, ticker))
        return list(self.articles)


class FakeAI:
    """AI collaborator double. Failing titles/contents raise RuntimeError."""

    def __init__(self, fail_summary_titles=(), fail_sentiment_contents=(), summary_error=None):
        self.fail_summary_titles = set(fail_summary_titles)
        self.fail_sentiment_contents = set(fail_sentiment_contents)
        self.summary_error = summary_error
        self.narrative_calls = []

    async def summarize_article(self, title, url, content, ticker):
        if title in self.fail_summary_titles:
            raise RuntimeError(f"summary failed for {title}")
        return f"Summary of {title}"

    async def analyze_sentiment(self, content):
        if content in self.fail_sentiment_contents:
            raise RuntimeError("sentiment failed")
        return "Positive"

    async def generate_financial_summary(self, ticker, company_name, articles, year_range):
        self.narrative_calls.append((ticker, company_name, articles, year_range))
        if self.summary_error is not None:
            raise self.summary_error
        return f"{company_name} outlook"


def make_article(index: int, ticker: str = "AAPL", published_at: str | None = None) -> NewsArticle:
    return NewsArticle(
        id=f"{ticker}-news-api-{index}-0",
        title=f"Article {index}",
        source="Reuters",
        article_url=f"https://example.com/{index}",
        article_content=f"content-{index}",
        published_at=published_at or datetime.now(timezone.utc).isoformat(),
    )


@pytest.fixture
def settings() -> Settings:
    return make_settings(alpha_vantage_api_key="test-key")
