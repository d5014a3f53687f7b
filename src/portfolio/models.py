"""Portfolio valuation models.

Holdings come from the external portfolio store; everything else here is
derived from them plus market data and is never persisted.
"""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

TimeRange = Literal["1W", "1M", "3M", "6M", "1Y", "ALL"]


class Holding(BaseModel):
    """A position as stored in the portfolio store."""

    id: str | None = Field(default=None, description="Store row identifier")
    symbol: str = Field(..., description="Stock ticker symbol", min_length=1)
    shares: float = Field(..., description="Number of shares held", gt=0)
    purchase_price: float = Field(..., description="Price paid per share", ge=0)
    purchase_date: date | None = Field(default=None, description="Date of purchase")

    @property
    def cost(self) -> float:
        """Total amount paid for the position."""
        return self.purchase_price * self.shares


class EnrichedHolding(Holding):
    """A holding joined with its current quote and dividend data.

    Market fields are None when the data was unavailable.
    """

    current_price: float | None = None
    change: float | None = None
    change_percent: float | None = None
    dividend_yield: float | None = None
    dividend_per_share: float | None = None

    @property
    def market_value(self) -> float:
        """Current value; 0 when no price is available."""
        return self.current_price * self.shares if self.current_price is not None else 0.0

    @property
    def gain(self) -> float:
        return self.market_value - self.cost

    @property
    def gain_percent(self) -> float:
        return self.gain / self.cost * 100 if self.cost > 0 else 0.0

    @property
    def annual_dividend(self) -> float:
        if self.dividend_per_share is None:
            return 0.0
        return self.dividend_per_share * self.shares


class PortfolioTotals(BaseModel):
    """Aggregate figures across a portfolio's holdings."""

    total_cost: float = 0.0
    total_value: float = 0.0
    total_gain: float = 0.0
    total_gain_percent: float = 0.0
    total_dividends: float = 0.0


class PortfolioHistoryPoint(BaseModel):
    """Portfolio value on one trading day."""

    date: date
    value: float
    cost: float
    gain: float
    gain_percent: float
