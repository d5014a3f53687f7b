"""Canonical market data models.

Every provider response is normalized into one of these Pydantic models
before it leaves the data layer, so callers never see provider-specific
shapes. Models are built fresh per request and carry no timestamps.
"""

from datetime import date
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class DataSource(str, Enum):
    """Upstream provider that served a result."""

    ALPHA_VANTAGE = "alpha_vantage"
    FINNHUB = "finnhub"


HistorySize = Literal["compact", "full"]


class SearchMatch(BaseModel):
    """A single symbol search hit.

    Attributes:
        symbol: Ticker symbol.
        name: Security name.
        type: Security type (e.g., "Equity", "Common Stock", "ETF").
        region: Listing region, empty when the provider does not report one.
    """

    symbol: str
    name: str
    type: str
    region: str


class Quote(BaseModel):
    """Real-time quote for a symbol.

    ``change_percent`` is in percentage units (1.5 means +1.5%), unlike the
    yield fields on :class:`Overview`, which are fractional.

    Attributes:
        symbol: Stock ticker symbol.
        price: Current/last price.
        change: Absolute change from previous close.
        change_percent: Change from previous close, in percent.
        source: Provider that served the quote.
    """

    symbol: str
    price: float
    change: float
    change_percent: float
    source: DataSource = DataSource.ALPHA_VANTAGE


class Overview(BaseModel):
    """Company fundamentals.

    Every field is always present; missing numbers are ``None`` and missing
    descriptive fields are ``"N/A"`` (``""`` for the description).
    ``dividend_yield``, ``payout_ratio`` and ``return_on_equity`` are
    fractional (0.03 means 3%).
    """

    symbol: str
    name: str = "N/A"
    exchange: str = "N/A"
    sector: str = "N/A"
    industry: str = "N/A"
    description: str = ""
    market_capitalization: float | None = None
    dividend_yield: float | None = None
    dividend_per_share: float | None = None
    ex_dividend_date: date | None = None
    payout_ratio: float | None = None
    week_52_high: float | None = None
    week_52_low: float | None = None
    pe_ratio: float | None = None
    eps: float | None = None
    book_value: float | None = None
    return_on_equity: float | None = None
    moving_average_50_day: float | None = None
    moving_average_200_day: float | None = None
    source: DataSource = DataSource.ALPHA_VANTAGE


class TimeSeriesPoint(BaseModel):
    """Daily OHLCV values, kept as strings like the primary provider sends them."""

    open: str
    high: str
    low: str
    close: str
    volume: str = Field(default="0")


# ISO date ("YYYY-MM-DD") -> OHLCV. Unordered; consumers sort by key.
TimeSeries = dict[str, TimeSeriesPoint]
