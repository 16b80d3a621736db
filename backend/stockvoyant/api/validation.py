"""Request validation for ticker path parameters."""
import re

from fastapi import HTTPException

# 1-10 chars: letters, digits, dots, dashes (AAPL, BRK.B, RDS-A)
TICKER_PATTERN = re.compile(r"^[A-Z0-9.\-]{1,10}$")


def validate_ticker(ticker: str) -> str:
    """Return the upper-cased, stripped ticker or raise a 400.

    Only the shape is checked here; whether the symbol exists is for the
    market data provider to decide.
    """
    normalized = (ticker or "").strip().upper()
    if not normalized:
        raise HTTPException(status_code=400, detail="Ticker cannot be empty")
    if not TICKER_PATTERN.match(normalized):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid ticker format: '{normalized}'. Use 1-10 letters, digits, dots or dashes.",
        )
    return normalized
