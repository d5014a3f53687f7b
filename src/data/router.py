"""Market data routing with a static provider fallback chain.

This module provides:
- ProviderAdapter: one provider's attempt/classify/normalize triple
- MarketDataRouter: the canonical market data operations, each resolved
  through the same ordered chain (Alpha Vantage → Finnhub)

Every invocation tries the providers in order, once each. Transport
failures, rate-limit notices, empty results and normalizer crashes all
move on to the next provider; when the chain is exhausted the operation's
sentinel (``[]`` or ``None``) is returned instead of raising.
"""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

import structlog

from src.data.alpha_vantage import AlphaVantageClient
from src.data.base import MarketDataError
from src.data.classifiers import (
    Classifier,
    OutcomeKind,
    classify_alpha_vantage_history,
    classify_alpha_vantage_overview,
    classify_alpha_vantage_quote,
    classify_alpha_vantage_search,
    classify_finnhub_history,
    classify_finnhub_overview,
    classify_finnhub_quote,
    classify_finnhub_search,
)
from src.data.finnhub import FinnhubClient
from src.data.models import (
    DataSource,
    HistorySize,
    Overview,
    Quote,
    SearchMatch,
    TimeSeries,
)
from src.data.normalizers import (
    normalize_alpha_vantage_history,
    normalize_alpha_vantage_overview,
    normalize_alpha_vantage_quote,
    normalize_alpha_vantage_search,
    normalize_finnhub_history,
    normalize_finnhub_overview,
    normalize_finnhub_quote,
    normalize_finnhub_search,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class Operation(str, Enum):
    """Canonical market data operations."""

    SEARCH = "search"
    QUOTE = "quote"
    OVERVIEW = "overview"
    HISTORY = "history"


@dataclass(frozen=True)
class MarketDataRequest:
    """Input shared by every adapter in a chain.

    Attributes:
        symbol: Ticker symbol, or the search keywords for SEARCH.
        size: History output size (HISTORY only).
    """

    symbol: str
    size: HistorySize = "compact"


@dataclass(frozen=True)
class ProviderAdapter(Generic[T]):
    """One provider's implementation of an operation.

    Attributes:
        source: Provider identity, for logging.
        attempt: Performs the request and returns the raw body.
        classify: Tags the raw body as success or a soft failure.
        normalize: Converts a successful body to the canonical result.
    """

    source: DataSource
    attempt: Callable[[MarketDataRequest], Awaitable[Any]]
    classify: Classifier
    normalize: Callable[[Any, MarketDataRequest], T]


class MarketDataRouter:
    """Resolves market data operations through the provider chain.

    The chain order is static: the primary provider is always tried first,
    with no health tracking between calls. The router holds no mutable
    state, so concurrent invocations do not interfere.

    Example:
        router = MarketDataRouter()
        quote = await router.get_quote("AAPL")
        if quote:
            print(f"{quote.symbol}: {quote.price} ({quote.change_percent:+.2f}%)")
    """

    def __init__(
        self,
        alpha_vantage: AlphaVantageClient | None = None,
        finnhub: FinnhubClient | None = None,
    ) -> None:
        """Initialize the router.

        Args:
            alpha_vantage: Primary provider client.
            finnhub: Secondary provider client.
        """
        self._alpha_vantage = alpha_vantage or AlphaVantageClient()
        self._finnhub = finnhub or FinnhubClient()
        self._logger = logger.bind(component="market_data_router")
        self._chains: dict[Operation, Sequence[ProviderAdapter[Any]]] = self._build_chains()

    def _build_chains(self) -> dict[Operation, Sequence[ProviderAdapter[Any]]]:
        """Build the ordered adapter list for each operation."""
        av = self._alpha_vantage
        fh = self._finnhub
        return {
            Operation.SEARCH: [
                ProviderAdapter(
                    source=DataSource.ALPHA_VANTAGE,
                    attempt=lambda req: av.search(req.symbol),
                    classify=classify_alpha_vantage_search,
                    normalize=lambda body, req: normalize_alpha_vantage_search(body),
                ),
                ProviderAdapter(
                    source=DataSource.FINNHUB,
                    attempt=lambda req: fh.search(req.symbol),
                    classify=classify_finnhub_search,
                    normalize=lambda body, req: normalize_finnhub_search(body),
                ),
            ],
            Operation.QUOTE: [
                ProviderAdapter(
                    source=DataSource.ALPHA_VANTAGE,
                    attempt=lambda req: av.quote(req.symbol),
                    classify=classify_alpha_vantage_quote,
                    normalize=lambda body, req: normalize_alpha_vantage_quote(body, req.symbol),
                ),
                ProviderAdapter(
                    source=DataSource.FINNHUB,
                    attempt=lambda req: fh.quote(req.symbol),
                    classify=classify_finnhub_quote,
                    normalize=lambda body, req: normalize_finnhub_quote(body, req.symbol),
                ),
            ],
            Operation.OVERVIEW: [
                ProviderAdapter(
                    source=DataSource.ALPHA_VANTAGE,
                    attempt=lambda req: av.overview(req.symbol),
                    classify=classify_alpha_vantage_overview,
                    normalize=lambda body, req: normalize_alpha_vantage_overview(body, req.symbol),
                ),
                ProviderAdapter(
                    source=DataSource.FINNHUB,
                    attempt=lambda req: fh.overview(req.symbol),
                    classify=classify_finnhub_overview,
                    normalize=lambda body, req: normalize_finnhub_overview(body, req.symbol),
                ),
            ],
            Operation.HISTORY: [
                ProviderAdapter(
                    source=DataSource.ALPHA_VANTAGE,
                    attempt=lambda req: av.history(req.symbol, req.size),
                    classify=classify_alpha_vantage_history,
                    normalize=lambda body, req: normalize_alpha_vantage_history(body),
                ),
                ProviderAdapter(
                    source=DataSource.FINNHUB,
                    attempt=lambda req: fh.history(req.symbol, req.size),
                    classify=classify_finnhub_history,
                    normalize=lambda body, req: normalize_finnhub_history(body),
                ),
            ],
        }

    def chain(self, operation: Operation) -> Sequence[ProviderAdapter[Any]]:
        """Get the ordered adapters for an operation."""
        return self._chains[operation]

    async def resolve(
        self,
        operation: Operation,
        request: MarketDataRequest,
        sentinel: T,
    ) -> T:
        """Run the fallback chain for one invocation.

        Args:
            operation: Which operation's chain to use.
            request: Operation input.
            sentinel: Value returned when no provider produced a result.

        Returns:
            The first non-empty normalized result, the last provider's
            result when it is empty, or ``sentinel``.
        """
        log = self._logger.bind(operation=operation.value, symbol=request.symbol)
        chain = self._chains[operation]

        for index, adapter in enumerate(chain):
            source = adapter.source.value
            is_last = index == len(chain) - 1

            try:
                body = await adapter.attempt(request)
            except MarketDataError as e:
                log.warning("provider_transport_error", provider=source, error=str(e))
                continue

            outcome = adapter.classify(body)
            if not outcome.ok:
                level = "info" if outcome.kind == OutcomeKind.NO_DATA else "warning"
                getattr(log, level)(
                    "provider_soft_failure",
                    provider=source,
                    outcome=outcome.kind.value,
                    detail=outcome.detail,
                )
                continue

            try:
                result = adapter.normalize(outcome.payload, request)
            except Exception as e:
                log.error(
                    "provider_normalization_error",
                    provider=source,
                    error=str(e),
                    exc_info=True,
                )
                continue

            # Nothing usable survived normalization
            if not result and not is_last:
                log.info(
                    "provider_soft_failure",
                    provider=source,
                    outcome=OutcomeKind.NO_DATA.value,
                )
                continue

            log.info("market_data_resolved", provider=source)
            return result

        log.warning("market_data_unavailable")
        return sentinel

    # =========================================================================
    # Canonical operations
    # =========================================================================

    async def search_symbol(self, query: str) -> list[SearchMatch]:
        """Search for symbols matching ``query``; empty list when unavailable."""
        return await self.resolve(Operation.SEARCH, MarketDataRequest(symbol=query), [])

    async def get_quote(self, symbol: str) -> Quote | None:
        """Get the latest quote, or None when unavailable."""
        return await self.resolve(Operation.QUOTE, MarketDataRequest(symbol=symbol), None)

    async def get_overview(self, symbol: str) -> Overview | None:
        """Get company fundamentals, or None when unavailable."""
        return await self.resolve(Operation.OVERVIEW, MarketDataRequest(symbol=symbol), None)

    async def get_history(
        self,
        symbol: str,
        size: HistorySize = "compact",
    ) -> TimeSeries | None:
        """Get the daily price series, or None when unavailable.

        Args:
            symbol: Stock ticker symbol.
            size: ``compact`` (~100 points) or ``full`` (up to a year or more).

        Returns:
            Mapping of ISO date to OHLCV; unordered.
        """
        return await self.resolve(
            Operation.HISTORY, MarketDataRequest(symbol=symbol, size=size), None
        )

    async def close(self) -> None:
        """Close underlying clients."""
        await self._alpha_vantage.close()
        await self._finnhub.close()


# ============================================================================
# Global instance
# ============================================================================

_router: MarketDataRouter | None = None


def get_market_data_router() -> MarketDataRouter:
    """Get the shared router, creating it on first use."""
    global _router
    if _router is None:
        _router = MarketDataRouter()
    return _router


def set_market_data_router(router: MarketDataRouter | None) -> None:
    """Replace the shared router (used by the app lifespan and tests)."""
    global _router
    _router = router
