import logging
from datetime import datetime, timedelta, timezone

import httpx

from stockvoyant.config import Settings, get_settings
from stockvoyant.schemas.news import NewsArticle
from stockvoyant.services.mock_data import mock_news, placeholder_image

logger = logging.getLogger(__name__)

REMOVED_TITLE = "[Removed]"


def _parse_published(value) -> datetime | None:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _text(value) -> str:
    return value.strip() if isinstance(value, str) else ""


def _is_usable(article) -> bool:
    if not isinstance(article, dict):
        return False
    title = _text(article.get("title"))
    if not title or title == REMOVED_TITLE:
        return False
    if not _text(article.get("url")):
        return False
    return bool(_text(article.get("content")) or _text(article.get("description")))


class NewsService:
    """NewsAPI "everything" search with a static fallback; never raises."""

    BASE_URL = "https://newsapi.org/v2/everything"

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.api_key = self.settings.newsapi_key
        self.enabled = bool(self.api_key)

    def _fallback(self, ticker: str) -> list[NewsArticle]:
        return mock_news(ticker, limit=self.settings.max_articles)

    async def _search(self, company_name: str, ticker: str) -> dict:
        since = datetime.now(timezone.utc) - timedelta(days=self.settings.news_lookback_days)
        params = {
            "q": f'"{company_name}" OR {ticker}',
            "from": since.date().isoformat(),
            "sortBy": "relevancy",
            "language": "en",
            "pageSize": self.settings.news_page_size,
        }
        async with httpx.AsyncClient(timeout=self.settings.http_timeout) as client:
            resp = await client.get(self.BASE_URL, params=params, headers={"X-Api-Key": self.api_key})
            return resp.json()

    async def fetch_news(self, company_name: str, ticker: str) -> list[NewsArticle]:
        if not self.enabled:
            logger.warning("NEWSAPI_KEY not configured, serving mock news")
            return self._fallback(ticker)

        try:
            payload = await self._search(company_name, ticker)
        except Exception as e:
            logger.error(f"NewsAPI request failed for {ticker}: {e}")
            return self._fallback(ticker)

        if not isinstance(payload, dict) or payload.get("status") != "ok":
            message = payload.get("message") if isinstance(payload, dict) else payload
            logger.error(f"NewsAPI error for {ticker}: {message}")
            return self._fallback(ticker)

        articles = payload.get("articles")
        raw = [a for a in articles if _is_usable(a)] if isinstance(articles, list) else []
        mapped = []
        for article in raw:
            if len(mapped) >= self.settings.max_articles:
                break
            try:
                mapped.append(self._to_article(article, ticker, len(mapped)))
            except (TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed NewsAPI article for {ticker}: {e}")
        return mapped

    def _to_article(self, article: dict, ticker: str, index: int) -> NewsArticle:
        source = article.get("source")
        if not isinstance(source, dict):
            source = {"name": _text(source)}
        published = _parse_published(article.get("publishedAt")) or datetime.now(timezone.utc)
        content = _text(article.get("content")) or _text(article.get("description"))
        return NewsArticle(
            id=f"{ticker}-news-{_text(source.get('id')) or 'api'}-{index}-{int(published.timestamp())}",
            title=_text(article["title"]),
            source=_text(source.get("name")) or "Unknown Source",
            article_url=_text(article["url"]),
            article_content=content[: self.settings.article_content_limit],
            published_at=published.isoformat(),
            image_url=_text(article.get("urlToImage")) or placeholder_image(ticker),
        )
