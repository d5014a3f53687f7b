"""FastAPI routes for the market data API.

This module provides:
- /market/* endpoints exposing the canonical market data operations
- /portfolio/* endpoints for valuation and daily history of holdings
- /health liveness endpoint
- Request/response models with validation
- CORS configuration
- Error handling
"""

from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

import structlog
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.config import settings
from src.data.models import HistorySize, Overview, Quote, SearchMatch, TimeSeries
from src.data.router import (
    MarketDataRouter,
    get_market_data_router,
    set_market_data_router,
)
from src.portfolio.models import (
    EnrichedHolding,
    Holding,
    PortfolioHistoryPoint,
    PortfolioTotals,
    TimeRange,
)
from src.portfolio.valuation import (
    calculate_totals,
    enrich_holdings,
    load_portfolio_history,
)

logger = structlog.get_logger(__name__)


# ============================================================================
# Request Models
# ============================================================================


class HoldingsRequest(BaseModel):
    """Request model for portfolio valuation."""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "holdings": [
                        {"symbol": "AAPL", "shares": 10, "purchase_price": 150.0},
                        {"symbol": "KO", "shares": 25, "purchase_price": 55.0},
                    ]
                }
            ]
        }
    }

    holdings: list[Holding] = Field(default_factory=list, description="Portfolio holdings")


class HistoryRequest(HoldingsRequest):
    """Request model for portfolio history."""

    time_range: TimeRange = Field(default="1M", description="Chart range: 1W, 1M, 3M, 6M, 1Y, ALL")


# ============================================================================
# Response Models
# ============================================================================


class ValuationResponse(BaseModel):
    """Holdings joined with market data plus portfolio totals."""

    holdings: list[EnrichedHolding]
    totals: PortfolioTotals


class HistoryResponse(BaseModel):
    """Daily portfolio value series."""

    time_range: str
    points: list[PortfolioHistoryPoint]


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str = Field(..., description="Error message")
    detail: str | None = Field(default=None, description="Detailed error information")


# ============================================================================
# Application Setup
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: ARG001
    """Application lifespan handler."""
    logger.info("application_starting")
    router = get_market_data_router()

    yield

    logger.info("application_shutting_down")
    await router.close()
    set_market_data_router(None)


OPENAPI_TAGS = [
    {
        "name": "Market Data",
        "description": "Symbol search, quotes, fundamentals and daily history. Results are "
        "served by the primary provider and fall back to the secondary one transparently.",
    },
    {
        "name": "Portfolio",
        "description": "Valuation and performance history for a set of holdings.",
    },
    {
        "name": "Health",
        "description": "Liveness check.",
    },
]


def create_app(
    title: str = "Portfolio Market Data API",
    version: str = "1.0.0",
    cors_origins: list[str] | None = None,
    debug: bool | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        title: API title.
        version: API version.
        cors_origins: Allowed CORS origins (defaults to settings).
        debug: Include exception details in 500 responses.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title=title,
        version=version,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
        debug=settings.DEBUG if debug is None else debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request, exc: HTTPException  # noqa: ARG001
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=exc.detail if isinstance(exc.detail, str) else str(exc.detail),
                detail=None,
            ).model_dump(),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception  # noqa: ARG001
    ) -> JSONResponse:
        logger.error("unhandled_exception", error=str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="Internal server error",
                detail=str(exc) if app.debug else None,
            ).model_dump(),
        )

    register_routes(app)

    return app


def _router() -> MarketDataRouter:
    return get_market_data_router()


def register_routes(app: FastAPI) -> None:
    """Register all routes on the application.

    Args:
        app: FastAPI application.
    """

    @app.get("/health", tags=["Health"])
    async def health() -> dict[str, Any]:
        """Basic liveness check."""
        return {"status": "ok", "timestamp": datetime.now(UTC).isoformat()}

    # Market data endpoints
    @app.get("/market/search", response_model=list[SearchMatch], tags=["Market Data"])
    async def search(q: str = Query(..., min_length=1, description="Keywords")) -> list[SearchMatch]:
        """Search symbols. Returns an empty list when nothing is available."""
        return await _router().search_symbol(q)

    @app.get(
        "/market/quote/{symbol}",
        response_model=Quote,
        tags=["Market Data"],
        responses={404: {"description": "Quote unavailable", "model": ErrorResponse}},
    )
    async def quote(symbol: str) -> Quote:
        """Latest quote for a symbol."""
        result = await _router().get_quote(symbol)
        if result is None:
            raise HTTPException(status_code=404, detail=f"Quote unavailable for {symbol}")
        return result

    @app.get(
        "/market/overview/{symbol}",
        response_model=Overview,
        tags=["Market Data"],
        responses={404: {"description": "Overview unavailable", "model": ErrorResponse}},
    )
    async def overview(symbol: str) -> Overview:
        """Company fundamentals for a symbol."""
        result = await _router().get_overview(symbol)
        if result is None:
            raise HTTPException(status_code=404, detail=f"Overview unavailable for {symbol}")
        return result

    @app.get(
        "/market/history/{symbol}",
        tags=["Market Data"],
        responses={404: {"description": "History unavailable", "model": ErrorResponse}},
    )
    async def history(
        symbol: str,
        size: HistorySize = Query(default="compact", description="compact or full"),
    ) -> TimeSeries:
        """Daily OHLCV series keyed by ISO date."""
        result = await _router().get_history(symbol, size)
        if result is None:
            raise HTTPException(status_code=404, detail=f"History unavailable for {symbol}")
        return result

    # Portfolio endpoints
    @app.post("/portfolio/valuation", response_model=ValuationResponse, tags=["Portfolio"])
    async def valuation(request: HoldingsRequest) -> ValuationResponse:
        """Current value, gain and dividend income of the given holdings."""
        enriched = await enrich_holdings(_router(), request.holdings)
        return ValuationResponse(holdings=enriched, totals=calculate_totals(enriched))

    @app.post("/portfolio/history", response_model=HistoryResponse, tags=["Portfolio"])
    async def portfolio_history(request: HistoryRequest) -> HistoryResponse:
        """Daily portfolio value over the requested range."""
        points = await load_portfolio_history(_router(), request.holdings, request.time_range)
        return HistoryResponse(time_range=request.time_range, points=points)


# Create default app instance
app = create_app()
