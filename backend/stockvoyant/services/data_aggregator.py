import asyncio
import enum
import logging
from datetime import datetime, timezone

from stockvoyant.analysis.year_range import extract_year_range
from stockvoyant.config import Settings, get_settings
from stockvoyant.schemas.insights import InsightsResponse, StockInsights
from stockvoyant.schemas.news import SUMMARY_UNAVAILABLE, NewsArticle, NewsArticleInput
from stockvoyant.schemas.stock import StockDetails
from stockvoyant.services.errors import (
    InsightsError,
    ProviderPremiumError,
    ProviderRateLimitError,
    UnsupportedTickerError,
)
from stockvoyant.services.mock_data import DEMO_TICKERS, synthetic_stock_details
from stockvoyant.services.news_service import NewsService
from stockvoyant.services.openai_service import OpenAIService
from stockvoyant.services.stock_data import StockDataService

logger = logging.getLogger(__name__)


class InsightsStage(str, enum.Enum):
    IDLE = "idle"
    FETCHING_QUOTE_AND_HISTORY = "fetching-quote-and-history"
    FETCHING_NEWS = "fetching-news"
    ENRICHING_ARTICLES = "enriching-articles"
    GENERATING_SUMMARY = "generating-summary"
    DONE = "done"
    FAILED = "failed"


def _rate_limit_message(ticker: str) -> str:
    return (
        f"API rate limit hit while fetching data for {ticker}. "
        "Please wait a minute and try again."
    )


def _premium_message(ticker: str) -> str:
    return (
        f"Could not fetch data for {ticker}. The data may be from a premium endpoint "
        "or the symbol may be invalid."
    )


def describe_error(exc: BaseException, ticker: str) -> str:
    """User-facing message for a failed request."""
    if isinstance(exc, ProviderRateLimitError):
        return _rate_limit_message(ticker)
    if isinstance(exc, ProviderPremiumError):
        return _premium_message(ticker)
    if isinstance(exc, InsightsError):
        return str(exc)

    # No structured signal left; fall back to the message wording
    text = str(exc)
    lowered = text.lower()
    if "rate limit" in lowered or "call frequency" in lowered:
        return _rate_limit_message(ticker)
    if "premium" in lowered or "invalid api call" in lowered:
        return _premium_message(ticker)
    return text or "An unexpected error occurred while fetching data. Please try again."


def _published_within(article: NewsArticle, now: datetime, days: int) -> bool:
    try:
        published = datetime.fromisoformat(article.published_at.replace("Z", "+00:00"))
    except ValueError:
        return False
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    # whole days elapsed, so an article 30.5 days old still counts as 30
    return (now - published).days <= days


class InsightsAggregator:
    def __init__(
        self,
        settings: Settings | None = None,
        stock_data: StockDataService | None = None,
        news: NewsService | None = None,
        ai: OpenAIService | None = None,
    ):
        self.settings = settings or get_settings()
        self.stock_data = stock_data or StockDataService(self.settings)
        self.news = news or NewsService(self.settings)
        self.ai = ai or OpenAIService(self.settings)
        self.stage = InsightsStage.IDLE

    def _enter(self, stage: InsightsStage, ticker: str):
        self.stage = stage
        logger.info(f"[{ticker}] {stage.value}")

    async def fetch_insights_for_ticker(self, ticker: str) -> InsightsResponse:
        ticker = (ticker or "").strip().upper()
        try:
            insights = await self._build_insights(ticker)
        except Exception as e:
            self._enter(InsightsStage.FAILED, ticker)
            logger.error(f"Insights request for {ticker} failed: {e}")
            return InsightsResponse(error=describe_error(e, ticker))
        self._enter(InsightsStage.DONE, ticker)
        return InsightsResponse(data=insights)

    async def _build_insights(self, ticker: str) -> StockInsights:
        if not ticker:
            raise UnsupportedTickerError("Please enter a ticker symbol.")

        self._enter(InsightsStage.FETCHING_QUOTE_AND_HISTORY, ticker)
        details = await self._fetch_stock_details(ticker)
        company_name = details.stock_data.name

        self._enter(InsightsStage.FETCHING_NEWS, ticker)
        articles = await self.news.fetch_news(company_name, ticker)

        now = datetime.now(timezone.utc)
        recent_inputs = [
            NewsArticleInput(
                title=a.title,
                article_content=a.article_content,
                published_at=a.published_at,
                source=a.source,
            )
            for a in articles
            if _published_within(a, now, self.settings.news_lookback_days)
        ]
        year_range = extract_year_range(details.historical_data, now=now)

        self._enter(InsightsStage.ENRICHING_ARTICLES, ticker)
        enriched = await self._enrich_articles(articles[: self.settings.max_articles], ticker)

        self._enter(InsightsStage.GENERATING_SUMMARY, ticker)
        if recent_inputs or year_range.is_complete:
            try:
                summary = await self.ai.generate_financial_summary(ticker, company_name, recent_inputs, year_range)
            except Exception as e:
                logger.error(f"Failed to generate financial summary for {ticker}: {e}")
                summary = f"AI summary could not be generated: {e}"
        else:
            summary = (
                f"Insufficient data (news or historical performance) for {ticker} "
                "to generate a financial summary."
            )

        return StockInsights(
            stock_data=details.stock_data,
            historical_data=details.historical_data,
            news_articles=enriched,
            financial_summary=summary,
        )

    async def _fetch_stock_details(self, ticker: str) -> StockDetails:
        if self.stock_data.is_configured:
            return await self.stock_data.fetch_stock_details(ticker)

        details = synthetic_stock_details(ticker, days=self.settings.history_limit)
        if details is None:
            raise UnsupportedTickerError(
                f'Ticker symbol "{ticker}" not found or not supported. '
                f"Supported: {', '.join(DEMO_TICKERS)}"
            )
        logger.warning(f"ALPHA_VANTAGE_API_KEY not configured, serving demo data for {ticker}")
        return details

    async def _enrich_articles(self, articles: list[NewsArticle], ticker: str) -> list[NewsArticle]:
        results = await asyncio.gather(
            *(self._enrich_article(a, ticker) for a in articles),
            return_exceptions=True,
        )
        enriched = []
        for article, result in zip(articles, results):
            if isinstance(result, BaseException):
                logger.error(f"Error processing article '{article.title}': {result}")
                result = article.model_copy(update={"summary": SUMMARY_UNAVAILABLE, "sentiment": "Unknown"})
            enriched.append(result)
        return enriched

    async def _enrich_article(self, article: NewsArticle, ticker: str) -> NewsArticle:
        content = article.article_content
        summary, sentiment = await asyncio.gather(
            self.ai.summarize_article(
                article.title,
                article.article_url,
                content[: self.settings.summary_content_limit],
                ticker,
            ),
            self.ai.analyze_sentiment(content[: self.settings.sentiment_content_limit]),
            return_exceptions=True,
        )
        if isinstance(summary, BaseException):
            logger.warning(f"Summary failed for article '{article.title}': {summary}")
            summary = SUMMARY_UNAVAILABLE
        if isinstance(sentiment, BaseException):
            logger.warning(f"Sentiment failed for article '{article.title}': {sentiment}")
            sentiment = "Unknown"
        return article.model_copy(update={"summary": summary, "sentiment": sentiment})
