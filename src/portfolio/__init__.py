"""Portfolio valuation built on the market data layer.

This module contains:
- Holding / EnrichedHolding models
- Totals and daily history aggregation
"""

from src.portfolio.models import (
    EnrichedHolding,
    Holding,
    PortfolioHistoryPoint,
    PortfolioTotals,
    TimeRange,
)
from src.portfolio.valuation import (
    build_portfolio_history,
    calculate_totals,
    enrich_holdings,
    filter_by_time_range,
    load_portfolio_history,
    range_start,
)

__all__ = [
    # Models
    "EnrichedHolding",
    "Holding",
    "PortfolioHistoryPoint",
    "PortfolioTotals",
    "TimeRange",
    # Valuation
    "build_portfolio_history",
    "calculate_totals",
    "enrich_holdings",
    "filter_by_time_range",
    "load_portfolio_history",
    "range_start",
]
