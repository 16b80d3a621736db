"""
Numeric coercion for provider payloads.

Alpha Vantage returns every figure as a string and uses "None", "-" or an
empty string for missing values. Everything numeric goes through
safe_parse_number before it reaches a schema, so NaN never leaks into a
response.
"""
import math

_MISSING_MARKERS = {"", "n/a", "none", "-", "null"}


def safe_parse_number(value) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if text.lower() in _MISSING_MARKERS:
            return None
        try:
            number = float(text.replace(",", ""))
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_percent(value) -> float | None:
    """Parse "0.7243%" style strings."""
    if isinstance(value, str):
        value = value.strip().rstrip("%")
    return safe_parse_number(value)


_SUFFIXES = ((1e6, "M"), (1e9, "B"), (1e12, "T"))


def format_magnitude(value) -> str:
    """Abbreviate market caps and volumes: 2.62T, 1.50B, 50.20M, 999,999."""
    number = safe_parse_number(value)
    if number is None:
        return "N/A"
    # suffix is chosen on the rounded figure, so 999,999.5 reads 1.00M
    if abs(round(number)) < 1e6:
        return f"{round(number):,}"
    for scale, suffix in _SUFFIXES:
        scaled = round(number / scale, 2)
        if abs(scaled) < 1000 or suffix == "T":
            return f"{scaled:.2f}{suffix}"
