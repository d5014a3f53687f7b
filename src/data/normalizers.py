"""Normalizers from provider payloads to the canonical models.

One pure function per (provider, operation). They tolerate missing or
garbage fields by degrading to ``None``/``"N/A"``/``""`` field by field;
an entity is never dropped because one field is unusable.

Unit conventions:
- Yield-like ratios (dividend yield, payout ratio, ROE) are fractional.
  Alpha Vantage already reports fractions, Finnhub reports percentages.
- ``Quote.change_percent`` is in percent for both providers.
"""

from datetime import UTC, date, datetime
from typing import Any

from src.data.models import (
    DataSource,
    Overview,
    Quote,
    SearchMatch,
    TimeSeries,
    TimeSeriesPoint,
)

MAX_SEARCH_RESULTS = 10

# Placeholders Alpha Vantage uses for "no value"
_MISSING = {"", "none", "-", "n/a", "null", "nan"}


# ============================================================================
# Field helpers
# ============================================================================


def to_float(value: Any) -> float | None:
    """Parse a provider number, returning None for placeholders and garbage."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    text = str(value).strip().rstrip("%").replace(",", "")
    if text.lower() in _MISSING:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def to_text(value: Any, default: str = "N/A") -> str:
    """Return a descriptive field, substituting ``default`` when missing."""
    if value is None:
        return default
    text = str(value).strip()
    if text.lower() in _MISSING:
        return default
    return text


def to_date(value: Any) -> date | None:
    """Parse an ISO date, returning None when absent or invalid."""
    if not value:
        return None
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def percent_to_fraction(value: Any) -> float | None:
    """Convert a 0-100 percentage to a 0-1 fraction."""
    number = to_float(value)
    return None if number is None else number / 100


def format_number(value: Any) -> str:
    """Render a number the way Alpha Vantage strings look ("10", "10.5").

    Missing or unparseable values render as ``""``.
    """
    number = to_float(value)
    if number is None:
        return ""
    if number.is_integer():
        return str(int(number))
    return repr(number)


def _first(mapping: dict[str, Any], *keys: str) -> Any:
    """Return the first key's value that parses as a number."""
    for key in keys:
        if to_float(mapping.get(key)) is not None:
            return mapping[key]
    return None


# ============================================================================
# Alpha Vantage
# ============================================================================


def normalize_alpha_vantage_search(body: dict[str, Any]) -> list[SearchMatch]:
    """Normalize a ``SYMBOL_SEARCH`` body."""
    matches = []
    for item in body.get("bestMatches") or []:
        if not isinstance(item, dict) or not item.get("1. symbol"):
            continue
        matches.append(
            SearchMatch(
                symbol=str(item["1. symbol"]),
                name=to_text(item.get("2. name"), ""),
                type=to_text(item.get("3. type"), ""),
                region=to_text(item.get("4. region"), ""),
            )
        )
    return matches


def normalize_alpha_vantage_quote(body: dict[str, Any], symbol: str) -> Quote | None:
    """Normalize a ``GLOBAL_QUOTE`` body.

    The percent change is taken from the pre-formatted ``"1.2345%"`` string.
    """
    data = body.get("Global Quote") or {}
    price = to_float(data.get("05. price"))
    if price is None:
        return None

    return Quote(
        symbol=to_text(data.get("01. symbol"), symbol),
        price=price,
        change=to_float(data.get("09. change")) or 0.0,
        change_percent=to_float(data.get("10. change percent")) or 0.0,
        source=DataSource.ALPHA_VANTAGE,
    )


def normalize_alpha_vantage_overview(body: dict[str, Any], symbol: str) -> Overview:
    """Normalize an ``OVERVIEW`` body; ratios are already fractional."""
    return Overview(
        symbol=to_text(body.get("Symbol"), symbol),
        name=to_text(body.get("Name")),
        exchange=to_text(body.get("Exchange")),
        sector=to_text(body.get("Sector")),
        industry=to_text(body.get("Industry")),
        description=to_text(body.get("Description"), ""),
        market_capitalization=to_float(body.get("MarketCapitalization")),
        dividend_yield=to_float(body.get("DividendYield")),
        dividend_per_share=to_float(body.get("DividendPerShare")),
        ex_dividend_date=to_date(body.get("ExDividendDate")),
        payout_ratio=to_float(body.get("PayoutRatio")),
        week_52_high=to_float(body.get("52WeekHigh")),
        week_52_low=to_float(body.get("52WeekLow")),
        pe_ratio=to_float(body.get("PERatio")),
        eps=to_float(body.get("EPS")),
        book_value=to_float(body.get("BookValue")),
        return_on_equity=to_float(body.get("ReturnOnEquityTTM")),
        moving_average_50_day=to_float(body.get("50DayMovingAverage")),
        moving_average_200_day=to_float(body.get("200DayMovingAverage")),
        source=DataSource.ALPHA_VANTAGE,
    )


def normalize_alpha_vantage_history(body: dict[str, Any]) -> TimeSeries | None:
    """Normalize a ``TIME_SERIES_DAILY`` body, keeping the string values."""
    series = body.get("Time Series (Daily)")
    if not isinstance(series, dict):
        return None

    result: TimeSeries = {}
    for day, values in series.items():
        if not isinstance(values, dict) or to_date(day) is None:
            continue
        result[str(day)[:10]] = TimeSeriesPoint(
            open=to_text(values.get("1. open"), ""),
            high=to_text(values.get("2. high"), ""),
            low=to_text(values.get("3. low"), ""),
            close=to_text(values.get("4. close"), ""),
            volume=to_text(values.get("5. volume"), ""),
        )
    return result


# ============================================================================
# Finnhub
# ============================================================================


def normalize_finnhub_search(body: dict[str, Any]) -> list[SearchMatch]:
    """Normalize a ``/search`` body, keeping at most ten matches.

    Finnhub does not report a listing region.
    """
    matches = []
    for item in body.get("result") or []:
        if not isinstance(item, dict):
            continue
        symbol = item.get("symbol") or item.get("displaySymbol")
        if not symbol:
            continue
        matches.append(
            SearchMatch(
                symbol=str(symbol),
                name=to_text(item.get("description"), ""),
                type=to_text(item.get("type"), ""),
                region="",
            )
        )
        if len(matches) == MAX_SEARCH_RESULTS:
            break
    return matches


def normalize_finnhub_quote(body: dict[str, Any], symbol: str) -> Quote | None:
    """Normalize a ``/quote`` body.

    Finnhub answers unknown symbols with zeros, which is treated as no
    data. The change is derived locally from the previous close.
    """
    price = to_float(body.get("c"))
    if not price:
        return None

    previous_close = to_float(body.get("pc"))
    change = price - previous_close if previous_close is not None else 0.0
    change_percent = change / previous_close * 100 if previous_close else 0.0

    return Quote(
        symbol=symbol,
        price=price,
        change=change,
        change_percent=change_percent,
        source=DataSource.FINNHUB,
    )


def normalize_finnhub_overview(body: dict[str, Any], symbol: str) -> Overview:
    """Merge a ``/stock/profile2`` and ``/stock/metric`` pair into an Overview.

    TTM metrics win over annual ones. Percent metrics become fractions and
    the market cap (reported in millions) becomes absolute.
    """
    profile = body.get("profile") if isinstance(body.get("profile"), dict) else {}
    metric_body = body.get("metric") if isinstance(body.get("metric"), dict) else {}
    metric = metric_body.get("metric") if isinstance(metric_body.get("metric"), dict) else {}

    market_cap = to_float(profile.get("marketCapitalization"))
    industry = to_text(profile.get("finnhubIndustry"))

    return Overview(
        symbol=to_text(profile.get("ticker"), symbol),
        name=to_text(profile.get("name")),
        exchange=to_text(profile.get("exchange")),
        sector=industry,
        industry=industry,
        description="",
        market_capitalization=None if market_cap is None else market_cap * 1_000_000,
        dividend_yield=percent_to_fraction(
            _first(metric, "currentDividendYieldTTM", "dividendYieldIndicatedAnnual")
        ),
        dividend_per_share=to_float(
            _first(metric, "dividendPerShareTTM", "dividendPerShareAnnual")
        ),
        ex_dividend_date=None,
        payout_ratio=percent_to_fraction(
            _first(metric, "payoutRatioTTM", "payoutRatioAnnual")
        ),
        week_52_high=to_float(metric.get("52WeekHigh")),
        week_52_low=to_float(metric.get("52WeekLow")),
        pe_ratio=to_float(
            _first(metric, "peTTM", "peBasicExclExtraTTM", "peAnnual", "peNormalizedAnnual")
        ),
        eps=to_float(
            _first(metric, "epsTTM", "epsBasicExclExtraItemsTTM", "epsAnnual")
        ),
        book_value=to_float(
            _first(metric, "bookValuePerShareQuarterly", "bookValuePerShareAnnual")
        ),
        return_on_equity=percent_to_fraction(_first(metric, "roeTTM", "roeRfy")),
        moving_average_50_day=None,
        moving_average_200_day=None,
        source=DataSource.FINNHUB,
    )


def normalize_finnhub_history(body: dict[str, Any]) -> TimeSeries | None:
    """Convert ``/stock/candle`` parallel arrays into a date-keyed series.

    Only ``s == "ok"`` bodies convert. Timestamps become UTC calendar dates
    and values are stringified to match the primary provider.
    """
    if body.get("s") != "ok":
        return None

    columns = [body.get(key) or [] for key in ("t", "o", "h", "l", "c", "v")]
    result: TimeSeries = {}
    for timestamp, open_, high, low, close, volume in zip(*columns, strict=False):
        seconds = to_float(timestamp)
        if seconds is None:
            continue
        day = datetime.fromtimestamp(seconds, tz=UTC).date().isoformat()
        result[day] = TimeSeriesPoint(
            open=format_number(open_),
            high=format_number(high),
            low=format_number(low),
            close=format_number(close),
            volume=format_number(volume),
        )
    return result
