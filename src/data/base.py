"""Shared HTTP plumbing for market data provider clients.

Provider clients are deliberately thin: they issue one GET per operation
and hand back the decoded JSON body. Anything that prevents getting a JSON
body at all (network errors, timeouts, non-2xx statuses, non-JSON bodies)
is raised as :class:`ProviderTransportError`. Business errors embedded in a
200 response are left for the router's classifiers.
"""

from typing import Any

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.config import settings
from src.data.models import DataSource

logger = structlog.get_logger(__name__)


class MarketDataError(Exception):
    """Base exception for market data errors."""

    pass


class ProviderTransportError(MarketDataError):
    """Raised when a provider could not be reached or returned no usable body.

    Attributes:
        provider: Provider that failed.
        status: HTTP status code, or 0 for network-level failures.
        message: Error detail.
    """

    def __init__(self, provider: DataSource, status: int, message: str):
        self.provider = provider
        self.status = status
        self.message = message
        super().__init__(f"{provider.value} transport error {status}: {message}")


class BaseMarketDataClient:
    """Async HTTP client base shared by the provider adapters.

    Subclasses set ``SOURCE``, ``BASE_URL`` and ``AUTH_PARAM`` and build
    their operations on top of :meth:`_request`.
    """

    SOURCE: DataSource
    BASE_URL: str
    AUTH_PARAM: str

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        retries: int | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Provider credential. Subclasses fall back to the
                environment when omitted.
            timeout: Request timeout in seconds (defaults to settings).
            retries: Extra attempts on connection/timeout errors
                (defaults to settings).
        """
        self.api_key = api_key
        self.timeout = settings.MARKET_DATA_TIMEOUT if timeout is None else timeout
        self.retries = settings.MARKET_DATA_RETRIES if retries is None else retries
        self._client: httpx.AsyncClient | None = None
        self._logger = logger.bind(component=f"{self.SOURCE.value}_client")

    @property
    def is_configured(self) -> bool:
        """Check if API key is configured."""
        return bool(self.api_key)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create httpx client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _send(self, url: str, params: dict[str, Any]) -> httpx.Response:
        """Issue the GET, retrying only network-level failures."""
        client = await self._get_client()
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(httpx.TransportError),
            stop=stop_after_attempt(self.retries + 1),
            wait=wait_exponential(multiplier=0.5, max=4),
            reraise=True,
        ):
            with attempt:
                return await client.get(url, params=params)

    async def _request(self, path: str, params: dict[str, Any]) -> Any:
        """Make an authenticated GET request and decode the JSON body.

        A missing credential is sent as-is; the upstream rejects it and
        that surfaces as an ordinary failure.

        Args:
            path: Path appended to ``BASE_URL`` (may be empty).
            params: Query parameters, without the credential.

        Returns:
            Decoded JSON body.

        Raises:
            ProviderTransportError: On network errors, timeouts, non-2xx
                statuses or undecodable bodies.
        """
        url = f"{self.BASE_URL}{path}"
        query = {**params, self.AUTH_PARAM: self.api_key or ""}

        self._logger.debug("provider_request", path=path, params=params)

        try:
            response = await self._send(url, query)
        except httpx.HTTPError as e:
            self._logger.warning("provider_request_failed", path=path, error=str(e))
            raise ProviderTransportError(self.SOURCE, 0, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise ProviderTransportError(self.SOURCE, response.status_code, response.text[:200])

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderTransportError(
                self.SOURCE, response.status_code, "Response body is not valid JSON"
            ) from e

        self._logger.debug("provider_response", path=path, status=response.status_code)
        return data

    async def __aenter__(self) -> "BaseMarketDataClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
