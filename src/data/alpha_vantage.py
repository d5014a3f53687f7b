"""Alpha Vantage API client (primary market data provider).

Alpha Vantage exposes a single query endpoint keyed by a ``function``
parameter. Rate-limit notices and errors come back as HTTP 200 with a
``Note``/``Information``/``Error Message`` field, so the raw body is
returned untouched and interpreted by the router.
"""

import os
from typing import Any

from src.data.base import BaseMarketDataClient
from src.data.models import DataSource, HistorySize


class AlphaVantageClient(BaseMarketDataClient):
    """Async client for the Alpha Vantage query API.

    Example:
        async with AlphaVantageClient() as client:
            body = await client.quote("IBM")
            print(body["Global Quote"]["05. price"])
    """

    SOURCE = DataSource.ALPHA_VANTAGE
    BASE_URL = "https://www.alphavantage.co/query"
    AUTH_PARAM = "apikey"

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        retries: int | None = None,
    ) -> None:
        """Initialize the Alpha Vantage client.

        Args:
            api_key: Alpha Vantage API key. If not provided, reads from
                ALPHA_VANTAGE_API_KEY environment variable.
            timeout: Request timeout in seconds.
            retries: Extra attempts on connection/timeout errors.
        """
        super().__init__(
            api_key=api_key or os.environ.get("ALPHA_VANTAGE_API_KEY"),
            timeout=timeout,
            retries=retries,
        )

    async def search(self, query: str) -> Any:
        """Search symbols matching keywords (``SYMBOL_SEARCH``)."""
        return await self._request("", {"function": "SYMBOL_SEARCH", "keywords": query})

    async def quote(self, symbol: str) -> Any:
        """Get the latest quote (``GLOBAL_QUOTE``)."""
        return await self._request("", {"function": "GLOBAL_QUOTE", "symbol": symbol})

    async def overview(self, symbol: str) -> Any:
        """Get company fundamentals (``OVERVIEW``)."""
        return await self._request("", {"function": "OVERVIEW", "symbol": symbol})

    async def history(self, symbol: str, size: HistorySize = "compact") -> Any:
        """Get the daily series (``TIME_SERIES_DAILY``).

        Args:
            symbol: Stock ticker symbol.
            size: ``compact`` for the latest ~100 points, ``full`` for the
                whole series.
        """
        return await self._request(
            "",
            {"function": "TIME_SERIES_DAILY", "symbol": symbol, "outputsize": size},
        )
