"""Tests for the Finnhub client."""

import os
from unittest.mock import AsyncMock, patch

import pytest

from src.data.base import ProviderTransportError
from src.data.finnhub import HISTORY_WINDOWS, FinnhubClient
from src.data.models import DataSource


class TestFinnhubClient:
    """Tests for FinnhubClient."""

    def test_init_from_env(self) -> None:
        """Test initialization from environment variable."""
        with patch.dict(os.environ, {"FINNHUB_API_KEY": "env_token"}):
            client = FinnhubClient()
            assert client.api_key == "env_token"
            assert client.AUTH_PARAM == "token"

    @pytest.mark.asyncio
    async def test_search_and_quote_paths(self) -> None:
        client = FinnhubClient(api_key="test_token")

        with patch.object(client, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = {}
            await client.search("apple")
            await client.quote("AAPL")

            assert mock_request.await_args_list[0].args == ("/search", {"q": "apple"})
            assert mock_request.await_args_list[1].args == ("/quote", {"symbol": "AAPL"})

    @pytest.mark.asyncio
    async def test_overview_combines_parts(self) -> None:
        client = FinnhubClient(api_key="test_token")

        async def fake_request(path: str, params: dict) -> dict:
            if path == "/stock/profile2":
                return {"name": "Apple Inc"}
            assert params["metric"] == "all"
            return {"metric": {"peTTM": 30.0}}

        with patch.object(client, "_request", side_effect=fake_request):
            body = await client.overview("AAPL")

        assert body == {"profile": {"name": "Apple Inc"}, "metric": {"metric": {"peTTM": 30.0}}}

    @pytest.mark.asyncio
    async def test_overview_tolerates_one_failed_part(self) -> None:
        client = FinnhubClient(api_key="test_token")

        async def fake_request(path: str, params: dict) -> dict:
            if path == "/stock/metric":
                raise ProviderTransportError(DataSource.FINNHUB, 429, "Too Many Requests")
            return {"name": "Apple Inc"}

        with patch.object(client, "_request", side_effect=fake_request):
            body = await client.overview("AAPL")

        assert body == {"profile": {"name": "Apple Inc"}, "metric": {}}

    @pytest.mark.asyncio
    async def test_overview_both_parts_failed(self) -> None:
        client = FinnhubClient(api_key="test_token")

        with patch.object(
            client,
            "_request",
            side_effect=ProviderTransportError(DataSource.FINNHUB, 0, "down"),
        ):
            with pytest.raises(ProviderTransportError):
                await client.overview("AAPL")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("size", ["compact", "full"])
    async def test_history_window(self, size: str) -> None:
        client = FinnhubClient(api_key="test_token")

        with patch.object(client, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = {"s": "no_data"}
            body = await client.history("AAPL", size)

        assert body == {"s": "no_data"}
        path, params = mock_request.await_args.args
        assert path == "/stock/candle"
        assert params["resolution"] == "D"
        span_days = (params["to"] - params["from"]) / 86400
        assert span_days == pytest.approx(HISTORY_WINDOWS[size], abs=1)
