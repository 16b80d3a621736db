from typing import Literal

from pydantic import BaseModel

NOT_AVAILABLE = "N/A"


class StockData(BaseModel):
    ticker: str
    name: str
    price: float
    change: float | None = None
    change_percent: float | None = None
    market_cap: str = NOT_AVAILABLE  # formatted, e.g. "2.62T"
    volume: str = NOT_AVAILABLE  # formatted, e.g. "50.20M"
    pe_ratio: float | Literal["N/A"] = NOT_AVAILABLE
    eps: float | Literal["N/A"] = NOT_AVAILABLE
    week52_high: float | None = None
    week52_low: float | None = None
    previous_close: float | None = None
    open_price: float | None = None
    day_high: float | None = None
    day_low: float | None = None
    last_updated: str  # ISO 8601


class HistoricalDataPoint(BaseModel):
    date: str  # YYYY-MM-DD
    price: float  # close
    open: float
    high: float
    low: float
    volume: int


class YearRange(BaseModel):
    year_start_price: float | None = None
    year_end_price: float | None = None
    year_high: float | None = None
    year_low: float | None = None

    @property
    def is_complete(self) -> bool:
        return None not in (self.year_start_price, self.year_end_price, self.year_high, self.year_low)


class StockDetails(BaseModel):
    """Quote record plus its daily series, as produced by a market data source."""
    stock_data: StockData
    historical_data: list[HistoricalDataPoint] = []
