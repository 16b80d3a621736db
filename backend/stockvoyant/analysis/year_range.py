"""
One-year performance figures used to ground the narrative summary.

The 52-week high/low falls back to the whole series when no point lies in
the trailing 365 days, so on stale data the figures are not strictly
52-week values.
"""
from datetime import date, datetime, timedelta, timezone

from stockvoyant.schemas.stock import HistoricalDataPoint, YearRange

YEAR = timedelta(days=365)


def extract_year_range(series: list[HistoricalDataPoint], now: datetime | None = None) -> YearRange:
    """`series` must already be ascending by date."""
    if not series:
        return YearRange()

    today = (now or datetime.now(timezone.utc)).date()
    year_ago = today - YEAR

    start_point = series[0]
    for point in series:
        if date.fromisoformat(point.date) <= year_ago:
            start_point = point
        else:
            break

    recent = [p.price for p in series if date.fromisoformat(p.date) >= year_ago]
    if not recent:
        recent = [p.price for p in series]

    return YearRange(
        year_start_price=start_point.price,
        year_end_price=series[-1].price,
        year_high=max(recent),
        year_low=min(recent),
    )
