from fastapi import APIRouter, Depends

from stockvoyant.api.dependencies import get_aggregator
from stockvoyant.api.validation import validate_ticker
from stockvoyant.schemas.insights import InsightsResponse
from stockvoyant.services.data_aggregator import InsightsAggregator

router = APIRouter(prefix="/api/insights", tags=["insights"])


@router.get("/{ticker}", response_model=InsightsResponse, response_model_exclude_none=True)
async def get_insights(
    ticker: str,
    aggregator: InsightsAggregator = Depends(get_aggregator),
):
    """Quote, history, news and AI summaries for a ticker, or an error message."""
    ticker = validate_ticker(ticker)
    return await aggregator.fetch_insights_for_ticker(ticker)
