"""Turn an Alpha Vantage daily time series into an ascending list of price points."""
import logging
from collections.abc import Mapping
from datetime import date
from typing import Any

from stockvoyant.analysis.normalize import safe_parse_number
from stockvoyant.schemas.stock import HistoricalDataPoint

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 365

# Alpha Vantage field names, adjusted and unadjusted series share these
_OPEN, _HIGH, _LOW, _CLOSE = "1. open", "2. high", "3. low", "4. close"
_VOLUME_KEYS = ("6. volume", "5. volume")


def _is_iso_date(value: str) -> bool:
    if not isinstance(value, str) or len(value) != 10:
        return False
    try:
        date.fromisoformat(value)
        return True
    except ValueError:
        return False


def _to_point(day: str, values: Mapping[str, Any]) -> HistoricalDataPoint | None:
    if not _is_iso_date(day) or not isinstance(values, Mapping):
        return None
    close = safe_parse_number(values.get(_CLOSE))
    if close is None:
        return None

    volume = None
    for key in _VOLUME_KEYS:
        volume = safe_parse_number(values.get(key))
        if volume is not None:
            break

    open_ = safe_parse_number(values.get(_OPEN))
    high = safe_parse_number(values.get(_HIGH))
    low = safe_parse_number(values.get(_LOW))
    return HistoricalDataPoint(
        date=day,
        price=close,
        open=open_ if open_ is not None else close,
        high=high if high is not None else close,
        low=low if low is not None else close,
        volume=int(volume or 0),
    )


def build_historical_series(
    raw: Mapping[str, Mapping[str, Any]],
    limit: int = HISTORY_LIMIT,
    ticker: str = "",
) -> list[HistoricalDataPoint]:
    """
    Malformed entries (bad date, non-finite close) are dropped. The result is
    strictly ascending by date with one point per day, trimmed to the most
    recent `limit` points. An empty result is returned, not raised.
    """
    by_date: dict[str, HistoricalDataPoint] = {}
    dropped = 0
    for day, values in raw.items():
        point = _to_point(day, values)
        if point is None:
            dropped += 1
            continue
        by_date[point.date] = point

    if dropped:
        logger.info(f"Dropped {dropped} malformed daily points for {ticker or 'series'}")

    series = [by_date[d] for d in sorted(by_date)]
    if limit > 0:
        series = series[-limit:]

    if not series:
        logger.warning(f"No usable historical points for {ticker or 'series'} after filtering")
    return series
