"""FastAPI routes for the market data API.

This module contains:
- Market data endpoints
- Portfolio valuation endpoints
- Request/response models
"""

from src.api.routes import (
    ErrorResponse,
    HistoryRequest,
    HistoryResponse,
    HoldingsRequest,
    ValuationResponse,
    app,
    create_app,
)

__all__ = [
    # Request models
    "HistoryRequest",
    "HoldingsRequest",
    # Response models
    "ErrorResponse",
    "HistoryResponse",
    "ValuationResponse",
    # App factory and instance
    "app",
    "create_app",
]
