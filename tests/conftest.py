"""Shared provider payload fixtures."""

from typing import Any

import pytest


@pytest.fixture
def av_search_body() -> dict[str, Any]:
    return {
        "bestMatches": [
            {
                "1. symbol": "TSCO",
                "2. name": "Tesco PLC",
                "3. type": "Equity",
                "4. region": "United Kingdom",
                "8. currency": "GBX",
                "9. matchScore": "0.7273",
            },
            {
                "1. symbol": "TSCDY",
                "2. name": "Tesco PLC",
                "3. type": "Equity",
                "4. region": "United States",
                "8. currency": "USD",
                "9. matchScore": "0.7143",
            },
        ]
    }


@pytest.fixture
def av_quote_body() -> dict[str, Any]:
    return {
        "Global Quote": {
            "01. symbol": "IBM",
            "02. open": "167.0000",
            "03. high": "168.7500",
            "04. low": "166.1100",
            "05. price": "168.2200",
            "06. volume": "4177624",
            "07. latest trading day": "2024-03-08",
            "08. previous close": "166.0100",
            "09. change": "2.2100",
            "10. change percent": "1.3312%",
        }
    }


@pytest.fixture
def av_overview_body() -> dict[str, Any]:
    return {
        "Symbol": "KO",
        "Name": "Coca-Cola Company",
        "Description": "The Coca-Cola Company is a beverage company.",
        "Exchange": "NYSE",
        "Sector": "CONSUMER STAPLES",
        "Industry": "BEVERAGES",
        "MarketCapitalization": "260000000000",
        "PERatio": "24.5",
        "BookValue": "6.0",
        "DividendPerShare": "1.84",
        "DividendYield": "0.031",
        "EPS": "2.47",
        "PayoutRatio": "0.74",
        "ReturnOnEquityTTM": "0.40",
        "52WeekHigh": "64.99",
        "52WeekLow": "51.55",
        "50DayMovingAverage": "60.1",
        "200DayMovingAverage": "59.3",
        "ExDividendDate": "2024-03-14",
    }


@pytest.fixture
def av_history_body() -> dict[str, Any]:
    return {
        "Meta Data": {"2. Symbol": "IBM"},
        "Time Series (Daily)": {
            "2024-03-08": {
                "1. open": "167.0000",
                "2. high": "168.7500",
                "3. low": "166.1100",
                "4. close": "168.2200",
                "5. volume": "4177624",
            },
            "2024-03-07": {
                "1. open": "165.0000",
                "2. high": "166.5000",
                "3. low": "164.9000",
                "4. close": "166.0100",
                "5. volume": "3511100",
            },
        },
    }


@pytest.fixture
def av_rate_limit_body() -> dict[str, Any]:
    return {
        "Note": "Thank you for using Alpha Vantage! Our standard API call frequency "
        "is 5 calls per minute and 500 calls per day."
    }


@pytest.fixture
def fh_search_body() -> dict[str, Any]:
    return {
        "count": 12,
        "result": [
            {
                "description": f"APPLE INC {i}",
                "displaySymbol": f"AAPL{i}",
                "symbol": f"AAPL{i}",
                "type": "Common Stock",
            }
            for i in range(12)
        ],
    }


@pytest.fixture
def fh_quote_body() -> dict[str, Any]:
    return {"c": 110, "d": 10, "dp": 10, "h": 111, "l": 99, "o": 100, "pc": 100, "t": 1700000000}


@pytest.fixture
def fh_overview_body() -> dict[str, Any]:
    return {
        "profile": {
            "country": "US",
            "currency": "USD",
            "exchange": "NEW YORK STOCK EXCHANGE, INC.",
            "finnhubIndustry": "Beverages",
            "marketCapitalization": 260000.5,
            "name": "Coca-Cola Co",
            "ticker": "KO",
        },
        "metric": {
            "metric": {
                "52WeekHigh": 64.99,
                "52WeekLow": 51.55,
                "currentDividendYieldTTM": 3.5,
                "dividendYieldIndicatedAnnual": 3.1,
                "dividendPerShareTTM": 1.86,
                "dividendPerShareAnnual": 1.84,
                "payoutRatioTTM": 74.0,
                "payoutRatioAnnual": 70.0,
                "roeTTM": 40.0,
                "peTTM": 24.5,
                "epsTTM": 2.47,
                "bookValuePerShareQuarterly": 6.0,
            },
            "metricType": "all",
            "symbol": "KO",
        },
    }


@pytest.fixture
def fh_history_body() -> dict[str, Any]:
    return {"s": "ok", "t": [1700000000], "o": [10], "h": [11], "l": [9], "c": [10.5], "v": [1000]}
