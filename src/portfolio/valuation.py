"""Portfolio valuation on top of the market data router.

This module provides:
- enrich_holdings: join holdings with quotes and dividend data
- calculate_totals: aggregate cost, value, gain and dividends
- build_portfolio_history / load_portfolio_history: daily portfolio value
- filter_by_time_range: trim a history to a chart range

Market data lookups for different holdings run concurrently; a holding
whose data is unavailable is still returned, with empty market fields.
"""

import asyncio
import calendar
from collections.abc import Iterable, Sequence
from datetime import date, timedelta

import structlog

from src.data.models import TimeSeries
from src.data.normalizers import to_float
from src.data.router import MarketDataRouter
from src.portfolio.models import (
    EnrichedHolding,
    Holding,
    PortfolioHistoryPoint,
    PortfolioTotals,
    TimeRange,
)

logger = structlog.get_logger(__name__)


async def _enrich(router: MarketDataRouter, holding: Holding) -> EnrichedHolding:
    quote, overview = await asyncio.gather(
        router.get_quote(holding.symbol),
        router.get_overview(holding.symbol),
    )
    return EnrichedHolding(
        **holding.model_dump(),
        current_price=quote.price if quote else None,
        change=quote.change if quote else None,
        change_percent=quote.change_percent if quote else None,
        dividend_yield=overview.dividend_yield if overview else None,
        dividend_per_share=overview.dividend_per_share if overview else None,
    )


async def enrich_holdings(
    router: MarketDataRouter,
    holdings: Sequence[Holding],
) -> list[EnrichedHolding]:
    """Fetch quote and overview for every holding concurrently.

    Args:
        router: Market data router.
        holdings: Holdings from the portfolio store.

    Returns:
        Enriched holdings in input order.
    """
    enriched = await asyncio.gather(*(_enrich(router, h) for h in holdings))
    logger.info(
        "holdings_enriched",
        count=len(enriched),
        priced=sum(1 for h in enriched if h.current_price is not None),
    )
    return list(enriched)


def calculate_totals(holdings: Iterable[EnrichedHolding]) -> PortfolioTotals:
    """Aggregate portfolio figures.

    Holdings without a current price count toward cost but add nothing to
    value. The gain percent is 0 for a zero-cost portfolio.
    """
    totals = PortfolioTotals()
    for holding in holdings:
        totals.total_cost += holding.cost
        totals.total_value += holding.market_value
        totals.total_gain += holding.gain
        totals.total_dividends += holding.annual_dividend

    if totals.total_cost > 0:
        totals.total_gain_percent = totals.total_gain / totals.total_cost * 100
    return totals


def build_portfolio_history(
    histories: Iterable[tuple[Holding, TimeSeries | None]],
) -> list[PortfolioHistoryPoint]:
    """Aggregate per-holding daily closes into a portfolio value series.

    On each date only the holdings that have a close for that date
    contribute, both to value and to cost. Holdings without a series are
    skipped.

    Args:
        histories: Pairs of holding and its daily series.

    Returns:
        Points sorted by date, oldest first.
    """
    values: dict[date, float] = {}
    costs: dict[date, float] = {}

    for holding, series in histories:
        if not series:
            continue
        for day, point in series.items():
            close = to_float(point.close)
            if close is None:
                continue
            key = date.fromisoformat(day)
            values[key] = values.get(key, 0.0) + close * holding.shares
            costs[key] = costs.get(key, 0.0) + holding.cost

    points = []
    for day in sorted(values):
        value, cost = values[day], costs[day]
        gain = value - cost
        points.append(
            PortfolioHistoryPoint(
                date=day,
                value=value,
                cost=cost,
                gain=gain,
                gain_percent=gain / cost * 100 if cost > 0 else 0.0,
            )
        )
    return points


def _months_ago(today: date, months: int) -> date:
    """Same day ``months`` calendar months back, clamped to month end."""
    month_index = today.year * 12 + today.month - 1 - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(today.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def range_start(time_range: str, today: date) -> date | None:
    """First date included in ``time_range``; None for ALL.

    Unknown ranges behave like ``1M``.
    """
    match time_range:
        case "ALL":
            return None
        case "1W":
            return today - timedelta(days=7)
        case "3M":
            return _months_ago(today, 3)
        case "6M":
            return _months_ago(today, 6)
        case "1Y":
            return _months_ago(today, 12)
        case _:
            return _months_ago(today, 1)


def filter_by_time_range(
    points: Sequence[PortfolioHistoryPoint],
    time_range: TimeRange | str,
    today: date | None = None,
) -> list[PortfolioHistoryPoint]:
    """Keep the points on or after the start of ``time_range``."""
    start = range_start(time_range, today or date.today())
    if start is None:
        return list(points)
    return [p for p in points if p.date >= start]


async def load_portfolio_history(
    router: MarketDataRouter,
    holdings: Sequence[Holding],
    time_range: TimeRange | str = "1M",
    today: date | None = None,
) -> list[PortfolioHistoryPoint]:
    """Fetch full history for every holding and build the chart series.

    Args:
        router: Market data router.
        holdings: Holdings from the portfolio store.
        time_range: Chart range to keep.
        today: Reference date for the range (defaults to today).

    Returns:
        Filtered portfolio history, oldest first.
    """
    if not holdings:
        return []

    series = await asyncio.gather(*(router.get_history(h.symbol, "full") for h in holdings))
    missing = [h.symbol for h, s in zip(holdings, series, strict=True) if s is None]
    if missing:
        logger.warning("history_unavailable", symbols=missing)

    points = build_portfolio_history(zip(holdings, series, strict=True))
    return filter_by_time_range(points, time_range, today)
