"""Data layer for market data integration.

This module provides:
- AlphaVantageClient / FinnhubClient: Async clients for the two providers
- MarketDataRouter: Primary → secondary fallback orchestration
- Canonical models: SearchMatch, Quote, Overview, TimeSeriesPoint
"""

from src.data.alpha_vantage import AlphaVantageClient
from src.data.base import MarketDataError, ProviderTransportError
from src.data.classifiers import OutcomeKind, ProviderOutcome
from src.data.finnhub import FinnhubClient
from src.data.models import (
    DataSource,
    HistorySize,
    Overview,
    Quote,
    SearchMatch,
    TimeSeries,
    TimeSeriesPoint,
)
from src.data.router import (
    MarketDataRequest,
    MarketDataRouter,
    Operation,
    ProviderAdapter,
    get_market_data_router,
    set_market_data_router,
)

__all__ = [
    # Clients
    "AlphaVantageClient",
    "FinnhubClient",
    # Errors
    "MarketDataError",
    "ProviderTransportError",
    # Classification
    "OutcomeKind",
    "ProviderOutcome",
    # Models
    "DataSource",
    "HistorySize",
    "Overview",
    "Quote",
    "SearchMatch",
    "TimeSeries",
    "TimeSeriesPoint",
    # Routing
    "MarketDataRequest",
    "MarketDataRouter",
    "Operation",
    "ProviderAdapter",
    "get_market_data_router",
    "set_market_data_router",
]
