from fastapi import Depends

from stockvoyant.config import Settings, get_settings
from stockvoyant.services.data_aggregator import InsightsAggregator


def get_aggregator(settings: Settings = Depends(get_settings)) -> InsightsAggregator:
    """One aggregator per request; tests override this dependency with fakes."""
    return InsightsAggregator(settings)
