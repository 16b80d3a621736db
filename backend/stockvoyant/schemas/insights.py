from pydantic import BaseModel, ConfigDict, model_validator

from stockvoyant.schemas.news import NewsArticle
from stockvoyant.schemas.stock import HistoricalDataPoint, StockData


class StockInsights(BaseModel):
    model_config = ConfigDict(frozen=True)

    stock_data: StockData
    historical_data: list[HistoricalDataPoint] = []
    news_articles: list[NewsArticle] = []
    financial_summary: str | None = None


class InsightsResponse(BaseModel):
    """Either the aggregated insights or a user-facing error message, never both."""
    data: StockInsights | None = None
    error: str | None = None

    @model_validator(mode="after")
    def _exactly_one(self):
        if (self.data is None) == (self.error is None):
            raise ValueError("InsightsResponse needs exactly one of 'data' or 'error'")
        return self
