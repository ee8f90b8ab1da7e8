"""Presentation adapter: pure mapping from portfolio/history state to view models."""

from decimal import Decimal
from typing import Iterable

import pytz

from etf_tracker.core.timezone import EASTERN_TZ, to_zone
from etf_tracker.domain.models import Portfolio, Snapshot
from etf_tracker.domain.views import (
    Article,
    ChartPoint,
    DashboardView,
    HoldingRow,
    SummaryView,
    ValuationResult,
)

CENT = Decimal("0.01")
SHARE_DISPLAY = Decimal("0.0001")
HUNDRED = Decimal("100")
START_LABEL = "Start"
LABEL_FORMAT = "%Y-%m-%d %H:%M"


def chart_label(snapshot: Snapshot, tz: pytz.BaseTzInfo = EASTERN_TZ) -> str:
    if snapshot.is_static:
        return START_LABEL
    return to_zone(snapshot.timestamp, tz).strftime(LABEL_FORMAT)


def build_rows(portfolio: Portfolio, valuation: ValuationResult) -> list[HoldingRow]:
    """One row per holding in ticker order."""
    rows = []
    for ticker in portfolio.tickers:
        holding = portfolio.holdings[ticker]
        metrics = valuation.holdings.get(ticker)
        if metrics is None:
            continue
        rows.append(
            HoldingRow(
                ticker=ticker,
                display_name=holding.display_name,
                shares=metrics.share_count.quantize(SHARE_DISPLAY),
                price=metrics.current_price.quantize(CENT),
                day_change_per_share=metrics.day_change_per_share.quantize(CENT),
                day_change_percent=(metrics.day_change_percent * HUNDRED).quantize(CENT),
                day_change_value=metrics.day_change_value.quantize(CENT),
                market_value=metrics.market_value.quantize(CENT),
                weight_percent=(metrics.weight * HUNDRED).quantize(CENT),
            )
        )
    return rows


def build_summary(portfolio: Portfolio, valuation: ValuationResult) -> SummaryView:
    """Total value, cash, day change and gain/loss vs. the initial investment."""
    initial = portfolio.initial_investment
    gain = valuation.total_value - initial
    gain_percent = gain / initial * HUNDRED if initial != 0 else Decimal("0")
    return SummaryView(
        total_value=valuation.total_value.quantize(CENT),
        cash=valuation.cash.quantize(CENT),
        day_change=valuation.total_day_change.quantize(CENT),
        total_gain=gain.quantize(CENT),
        total_gain_percent=gain_percent.quantize(CENT),
    )


def build_chart(points: Iterable[Snapshot], tz: pytz.BaseTzInfo = EASTERN_TZ) -> list[ChartPoint]:
    return [
        ChartPoint(label=chart_label(p, tz), value=p.value.quantize(CENT), is_transient=p.is_transient)
        for p in points
    ]


def build_dashboard(
    portfolio: Portfolio,
    valuation: ValuationResult,
    chart_points: Iterable[Snapshot],
    tz: pytz.BaseTzInfo = EASTERN_TZ,
) -> DashboardView:
    """Assemble the full dashboard view model. No side effects."""
    return DashboardView(
        rows=build_rows(portfolio, valuation),
        summary=build_summary(portfolio, valuation),
        chart=build_chart(chart_points, tz),
    )


def latest_news(articles: Iterable[Article], limit: int = 7) -> list[Article]:
    """Newest first, one article per headline, articles without a headline dropped."""
    ordered = sorted((a for a in articles if a and a.headline), key=lambda a: a.published_at, reverse=True)
    seen = set()
    unique = []
    for article in ordered:
        if article.headline in seen:
            continue
        seen.add(article.headline)
        unique.append(article)
    return unique[:limit]
