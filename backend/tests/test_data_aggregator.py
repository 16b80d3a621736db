"""End-to-end tests for the insights orchestrator with injected fakes."""

import asyncio
from datetime import datetime, timedelta, timezone

import httpx

from stockvoyant.services.data_aggregator import InsightsAggregator, InsightsStage, describe_error
from stockvoyant.services.errors import (
    ProviderPremiumError,
    ProviderRateLimitError,
    QuoteUnavailableError,
)
from stockvoyant.services.news_service import NewsService
from stockvoyant.services.openai_service import OpenAIService
from stockvoyant.services.stock_data import StockDataService

from conftest import (
    AAPL_OVERVIEW,
    AAPL_QUOTE,
    FakeAI,
    FakeAlphaVantage,
    FakeNews,
    make_article,
    make_daily_series,
    make_settings,
)


def _aggregator(settings, client=None, news=None, ai=None):
    return InsightsAggregator(
        settings,
        stock_data=StockDataService(settings, client=client or FakeAlphaVantage(AAPL_QUOTE, AAPL_OVERVIEW, make_daily_series(400))),
        news=news or FakeNews([make_article(i) for i in range(1, 4)]),
        ai=ai or FakeAI(),
    )


def test_success_scenario(settings):
    aggregator = _aggregator(settings)
    result = asyncio.run(aggregator.fetch_insights_for_ticker("aapl"))

    assert result.error is None
    data = result.data
    assert len(data.historical_data) == 365
    assert data.stock_data.name == "Apple Inc."
    assert data.stock_data.price == 170.34
    assert data.financial_summary == "Apple Inc. outlook"
    assert [a.summary for a in data.news_articles] == ["Summary of Article 1", "Summary of Article 2", "Summary of Article 3"]
    assert all(a.sentiment == "Positive" for a in data.news_articles)
    assert aggregator.stage is InsightsStage.DONE


def test_news_fetched_with_resolved_company_name(settings):
    news = FakeNews()
    asyncio.run(_aggregator(settings, news=news).fetch_insights_for_ticker("AAPL"))
    assert news.calls == [("Apple Inc.", "AAPL")]


def test_mandatory_quote_failure(settings):
    client = FakeAlphaVantage({}, AAPL_OVERVIEW, make_daily_series(30))
    aggregator = _aggregator(settings, client=client)
    result = asyncio.run(aggregator.fetch_insights_for_ticker("ZZZZ"))

    assert result.data is None
    assert "ZZZZ" in result.error
    assert "quote" in result.error
    assert aggregator.stage is InsightsStage.FAILED


def test_provider_server_error_reads_as_missing_quote(monkeypatch):
    async def fake_get(self, url, params=None, **kwargs):
        return httpx.Response(500, json={}, request=httpx.Request("GET", url))

    monkeypatch.setattr(httpx.AsyncClient, "get", fake_get)
    aggregator = InsightsAggregator(make_settings(alpha_vantage_api_key="k"), news=FakeNews(), ai=FakeAI())
    result = asyncio.run(aggregator.fetch_insights_for_ticker("ZZZZ"))

    assert result.data is None
    assert "ZZZZ" in result.error
    assert "quote" in result.error
    assert "HTTP 500" not in result.error
    assert aggregator.stage is InsightsStage.FAILED


def test_rate_limit_is_rewritten(settings):
    client = FakeAlphaVantage(ProviderRateLimitError("Alpha Vantage rate limit reached"), AAPL_OVERVIEW, make_daily_series(5))
    result = asyncio.run(_aggregator(settings, client=client).fetch_insights_for_ticker("AAPL"))
    assert "rate limit" in result.error
    assert "try again" in result.error


def test_premium_is_rewritten(settings):
    client = FakeAlphaVantage(AAPL_QUOTE, AAPL_OVERVIEW, ProviderPremiumError("premium endpoint"))
    result = asyncio.run(_aggregator(settings, client=client).fetch_insights_for_ticker("AAPL"))
    assert "premium endpoint" in result.error
    assert "invalid" in result.error


def test_fan_out_fault_isolation(settings):
    articles = [make_article(i) for i in range(1, 7)]
    ai = FakeAI(fail_summary_titles={"Article 3"}, fail_sentiment_contents={"content-5"})
    result = asyncio.run(_aggregator(settings, news=FakeNews(articles), ai=ai).fetch_insights_for_ticker("AAPL"))

    enriched = result.data.news_articles
    assert [a.id for a in enriched] == [a.id for a in articles]
    assert enriched[2].summary == "AI summary currently unavailable."
    assert enriched[2].sentiment == "Positive"
    assert enriched[4].summary == "Summary of Article 5"
    assert enriched[4].sentiment == "Unknown"
    for i in (0, 1, 3, 5):
        assert enriched[i].summary == f"Summary of Article {i + 1}"
        assert enriched[i].sentiment == "Positive"
        assert enriched[i].title == articles[i].title


def test_at_most_six_articles_enriched(settings):
    articles = [make_article(i) for i in range(1, 10)]
    result = asyncio.run(_aggregator(settings, news=FakeNews(articles)).fetch_insights_for_ticker("AAPL"))
    assert len(result.data.news_articles) == 6


def test_narrative_uses_only_recent_news(settings):
    old = (datetime.now(timezone.utc) - timedelta(days=45)).isoformat()
    articles = [make_article(1), make_article(2, published_at=old), make_article(3, published_at="not a date")]
    ai = FakeAI()
    asyncio.run(_aggregator(settings, news=FakeNews(articles), ai=ai).fetch_insights_for_ticker("AAPL"))

    [(ticker, company, inputs, year_range)] = ai.narrative_calls
    assert ticker == "AAPL"
    assert company == "Apple Inc."
    assert [a.title for a in inputs] == ["Article 1"]
    assert year_range.is_complete


def test_narrative_counts_whole_days(settings):
    now = datetime.now(timezone.utc)
    edge = (now - timedelta(days=30, hours=12)).isoformat()
    stale = (now - timedelta(days=31, hours=1)).isoformat()
    articles = [make_article(1, published_at=edge), make_article(2, published_at=stale)]
    ai = FakeAI()
    asyncio.run(_aggregator(settings, news=FakeNews(articles), ai=ai).fetch_insights_for_ticker("AAPL"))

    [(_, _, inputs, _)] = ai.narrative_calls
    assert [a.title for a in inputs] == ["Article 1"]


def test_narrative_failure_is_substituted(settings):
    ai = FakeAI(summary_error=RuntimeError("model overloaded"))
    result = asyncio.run(_aggregator(settings, ai=ai).fetch_insights_for_ticker("AAPL"))
    assert result.data.financial_summary == "AI summary could not be generated: model overloaded"


def test_insufficient_data_skips_narrative(settings):
    client = FakeAlphaVantage(AAPL_QUOTE, AAPL_OVERVIEW, {"garbage": {"4. close": "x"}})
    ai = FakeAI()
    result = asyncio.run(_aggregator(settings, client=client, news=FakeNews([]), ai=ai).fetch_insights_for_ticker("AAPL"))

    assert result.data.historical_data == []
    assert result.data.financial_summary.startswith("Insufficient data")
    assert ai.narrative_calls == []


def test_demo_fallback_without_market_key():
    settings = make_settings()
    aggregator = InsightsAggregator(settings, news=NewsService(settings), ai=OpenAIService(settings))

    result = asyncio.run(aggregator.fetch_insights_for_ticker("AAPL"))
    assert result.error is None
    assert 160 < result.data.stock_data.price < 180
    assert len(result.data.historical_data) == 365
    # mock news, AI unconfigured: every article falls back
    assert len(result.data.news_articles) == 6
    assert all(a.sentiment == "Unknown" for a in result.data.news_articles)
    assert result.data.financial_summary.startswith("AI summary could not be generated")

    result = asyncio.run(aggregator.fetch_insights_for_ticker("ZZZZ"))
    assert result.data is None
    assert "not supported" in result.error
    assert "AAPL" in result.error


def test_empty_ticker_is_an_error(settings):
    result = asyncio.run(_aggregator(settings).fetch_insights_for_ticker("   "))
    assert result.error


def test_unexpected_exception_never_escapes(settings):
    class BrokenNews:
        async def fetch_news(self, company_name, ticker):
            raise ValueError("news exploded")

    result = asyncio.run(_aggregator(settings, news=BrokenNews()).fetch_insights_for_ticker("AAPL"))
    assert result.data is None
    assert result.error == "news exploded"


class TestDescribeError:
    def test_typed_errors(self):
        assert "rate limit" in describe_error(ProviderRateLimitError("x"), "AAPL")
        assert "premium" in describe_error(ProviderPremiumError("x"), "AAPL")
        assert describe_error(QuoteUnavailableError("No current quote data found for X"), "X") == "No current quote data found for X"

    def test_message_fallback(self):
        assert "rate limit" in describe_error(RuntimeError("Our standard API call frequency is 5"), "AAPL")
        assert "premium" in describe_error(RuntimeError("This is a premium endpoint"), "AAPL")

    def test_empty_message(self):
        assert "unexpected error" in describe_error(RuntimeError(), "AAPL")
