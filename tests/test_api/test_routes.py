"""Tests for FastAPI routes."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from src.api.routes import create_app
from src.data.models import DataSource, Overview, Quote, SearchMatch, TimeSeriesPoint
from src.data.router import set_market_data_router

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def market_router():
    """Stub market data router installed as the shared instance."""
    router = MagicMock()
    router.search_symbol = AsyncMock(return_value=[])
    router.get_quote = AsyncMock(return_value=None)
    router.get_overview = AsyncMock(return_value=None)
    router.get_history = AsyncMock(return_value=None)
    router.close = AsyncMock()
    set_market_data_router(router)
    yield router
    set_market_data_router(None)


@pytest.fixture
def client(market_router):
    """Create test client."""
    return TestClient(create_app(title="Test API", version="0.1.0"))


# ============================================================================
# Tests
# ============================================================================


class TestHealth:
    """Tests for the health endpoint."""

    def test_health(self, client) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestMarketEndpoints:
    """Tests for /market endpoints."""

    def test_search(self, client, market_router) -> None:
        market_router.search_symbol.return_value = [
            SearchMatch(symbol="TSCO", name="Tesco PLC", type="Equity", region="United Kingdom")
        ]

        response = client.get("/market/search", params={"q": "tesco"})

        assert response.status_code == 200
        assert response.json() == [
            {"symbol": "TSCO", "name": "Tesco PLC", "type": "Equity", "region": "United Kingdom"}
        ]
        market_router.search_symbol.assert_awaited_once_with("tesco")

    def test_search_empty(self, client) -> None:
        response = client.get("/market/search", params={"q": "zzzz"})
        assert response.status_code == 200
        assert response.json() == []

    def test_search_requires_query(self, client) -> None:
        assert client.get("/market/search").status_code == 422

    def test_quote(self, client, market_router) -> None:
        market_router.get_quote.return_value = Quote(
            symbol="AAPL", price=110.0, change=10.0, change_percent=10.0, source=DataSource.FINNHUB
        )

        response = client.get("/market/quote/AAPL")

        assert response.status_code == 200
        data = response.json()
        assert data["price"] == 110.0
        assert data["change_percent"] == 10.0
        assert data["source"] == "finnhub"

    def test_quote_unavailable(self, client) -> None:
        response = client.get("/market/quote/NOPE")
        assert response.status_code == 404
        assert response.json()["error"] == "Quote unavailable for NOPE"

    def test_overview(self, client, market_router) -> None:
        market_router.get_overview.return_value = Overview(symbol="KO", name="Coca-Cola")

        response = client.get("/market/overview/KO")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Coca-Cola"
        assert data["dividend_yield"] is None
        assert "ex_dividend_date" in data

    def test_overview_unavailable(self, client) -> None:
        assert client.get("/market/overview/NOPE").status_code == 404

    def test_history(self, client, market_router) -> None:
        market_router.get_history.return_value = {
            "2024-03-08": TimeSeriesPoint(
                open="1", high="2", low="0.5", close="1.5", volume="100"
            )
        }

        response = client.get("/market/history/IBM", params={"size": "full"})

        assert response.status_code == 200
        assert response.json()["2024-03-08"]["close"] == "1.5"
        market_router.get_history.assert_awaited_once_with("IBM", "full")

    def test_history_invalid_size(self, client) -> None:
        assert client.get("/market/history/IBM", params={"size": "huge"}).status_code == 422

    def test_history_unavailable(self, client) -> None:
        assert client.get("/market/history/NOPE").status_code == 404


class TestPortfolioEndpoints:
    """Tests for /portfolio endpoints."""

    def test_valuation(self, client, market_router) -> None:
        market_router.get_quote.return_value = Quote(
            symbol="KO", price=60.0, change=0.6, change_percent=1.0
        )
        market_router.get_overview.return_value = Overview(symbol="KO", dividend_per_share=1.84)

        response = client.post(
            "/portfolio/valuation",
            json={"holdings": [{"symbol": "KO", "shares": 20, "purchase_price": 50.0}]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["holdings"][0]["current_price"] == 60.0
        assert data["totals"]["total_value"] == 1200.0
        assert data["totals"]["total_gain"] == 200.0
        assert data["totals"]["total_dividends"] == pytest.approx(36.8)

    def test_valuation_rejects_bad_holding(self, client) -> None:
        response = client.post(
            "/portfolio/valuation",
            json={"holdings": [{"symbol": "KO", "shares": 0, "purchase_price": 50.0}]},
        )
        assert response.status_code == 422

    def test_history(self, client, market_router) -> None:
        response = client.post(
            "/portfolio/history",
            json={
                "holdings": [{"symbol": "KO", "shares": 20, "purchase_price": 50.0}],
                "time_range": "ALL",
            },
        )

        assert response.status_code == 200
        assert response.json() == {"time_range": "ALL", "points": []}
        market_router.get_history.assert_awaited_once_with("KO", "full")


class TestErrorHandling:
    """Tests for the exception handlers."""

    def test_unexpected_error_is_500(self, market_router) -> None:
        market_router.get_quote.side_effect = RuntimeError("bug")
        client = TestClient(create_app(debug=False), raise_server_exceptions=False)

        response = client.get("/market/quote/AAPL")

        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"
