from typing import Literal

from pydantic import BaseModel

Sentiment = Literal["Positive", "Neutral", "Negative", "Unknown"]

SENTIMENTS: tuple[str, ...] = ("Positive", "Neutral", "Negative", "Unknown")

SUMMARY_UNAVAILABLE = "AI summary currently unavailable."


class NewsArticle(BaseModel):
    id: str
    title: str
    source: str
    article_url: str
    article_content: str  # AI input, not displayed
    published_at: str  # ISO 8601
    image_url: str | None = None
    summary: str = SUMMARY_UNAVAILABLE
    sentiment: Sentiment = "Unknown"


class NewsArticleInput(BaseModel):
    """Projection of an article handed to the narrative summary prompt."""
    title: str
    article_content: str
    published_at: str
    source: str
