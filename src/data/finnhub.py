"""Finnhub API client (secondary market data provider).

Finnhub uses one REST path per operation. Company fundamentals are split
across ``/stock/profile2`` and ``/stock/metric``; :meth:`FinnhubClient.overview`
fetches both and returns them side by side for the normalizer to merge.
"""

import asyncio
import os
from datetime import UTC, datetime, timedelta
from typing import Any

from src.data.base import BaseMarketDataClient, ProviderTransportError
from src.data.models import DataSource, HistorySize

# Calendar-day windows for the candle endpoint
HISTORY_WINDOWS: dict[str, int] = {
    "compact": 140,  # ~100 trading days
    "full": 365,
}


class FinnhubClient(BaseMarketDataClient):
    """Async client for the Finnhub REST API.

    Example:
        async with FinnhubClient() as client:
            body = await client.quote("AAPL")
            print(body["c"])
    """

    SOURCE = DataSource.FINNHUB
    BASE_URL = "https://finnhub.io/api/v1"
    AUTH_PARAM = "token"

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        retries: int | None = None,
    ) -> None:
        """Initialize the Finnhub client.

        Args:
            api_key: Finnhub API token. If not provided, reads from
                FINNHUB_API_KEY environment variable.
            timeout: Request timeout in seconds.
            retries: Extra attempts on connection/timeout errors.
        """
        super().__init__(
            api_key=api_key or os.environ.get("FINNHUB_API_KEY"),
            timeout=timeout,
            retries=retries,
        )

    async def search(self, query: str) -> Any:
        """Search symbols (``/search``)."""
        return await self._request("/search", {"q": query})

    async def quote(self, symbol: str) -> Any:
        """Get the latest quote (``/quote``)."""
        return await self._request("/quote", {"symbol": symbol})

    async def profile(self, symbol: str) -> Any:
        """Get the company profile (``/stock/profile2``)."""
        return await self._request("/stock/profile2", {"symbol": symbol})

    async def metrics(self, symbol: str) -> Any:
        """Get basic financial metrics (``/stock/metric``)."""
        return await self._request("/stock/metric", {"symbol": symbol, "metric": "all"})

    async def overview(self, symbol: str) -> dict[str, Any]:
        """Fetch profile and metrics concurrently.

        A failed sub-request is replaced by an empty object so the other
        half can still be used; only when both fail is the call a
        transport failure.

        Returns:
            ``{"profile": <profile body>, "metric": <metric body>}``.

        Raises:
            ProviderTransportError: If both sub-requests fail.
        """
        profile, metric = await asyncio.gather(
            self.profile(symbol),
            self.metrics(symbol),
            return_exceptions=True,
        )

        if isinstance(profile, ProviderTransportError) and isinstance(
            metric, ProviderTransportError
        ):
            raise profile

        for name, part in (("profile", profile), ("metric", metric)):
            if isinstance(part, BaseException):
                if not isinstance(part, ProviderTransportError):
                    raise part
                self._logger.warning(
                    "overview_part_unavailable", symbol=symbol, part=name, error=str(part)
                )

        return {
            "profile": {} if isinstance(profile, BaseException) else profile,
            "metric": {} if isinstance(metric, BaseException) else metric,
        }

    async def history(self, symbol: str, size: HistorySize = "compact") -> Any:
        """Get daily candles (``/stock/candle``).

        Args:
            symbol: Stock ticker symbol.
            size: ``compact`` for roughly the last 100 trading days,
                ``full`` for the last year.
        """
        end = datetime.now(UTC)
        start = end - timedelta(days=HISTORY_WINDOWS.get(size, HISTORY_WINDOWS["compact"]))
        return await self._request(
            "/stock/candle",
            {
                "symbol": symbol,
                "resolution": "D",
                "from": int(start.timestamp()),
                "to": int(end.timestamp()),
            },
        )
