"""Plain-text rendering of refresh results for the CLI."""

from typing import Optional

from portfolio_tracker.domain.views import PerformanceData, PortfolioUpdate, SeriesUpdate

PLACEHOLDER = "-"
ROW_FORMAT = "{0: >26} | {1: >12} | {2: >10} | {3: >12} | {4: >10} | {5: >10} | {6: >8}"


def fmt_number(value: Optional[float], digits: int = 2) -> str:
    """Format a metric; None renders as a placeholder, never as zero."""
    if value is None:
        return PLACEHOLDER
    return f"{value:.{digits}f}"


def fmt_percent(value: Optional[float]) -> str:
    if value is None:
        return PLACEHOLDER
    return f"{value:+.2f}%"


def render_portfolio(update: PortfolioUpdate, previous_total: Optional[float] = None) -> str:
    """Render positions, allocation, total and connectivity of one update."""
    if update.portfolio is None:
        return f"Error: {update.error or 'no portfolio data'}"

    portfolio = update.portfolio
    lines = [
        ROW_FORMAT.format("Name", "Asset Class", "Amount", "Balance", "Avg Cost", "PnL", "Daily"),
        "-" * 106,
    ]
    for view in portfolio.views:
        lines.append(
            ROW_FORMAT.format(
                view.name[:26],
                view.asset_class[:12],
                fmt_number(view.amount, 4).rstrip("0").rstrip("."),
                fmt_number(view.balance),
                fmt_number(view.average_cost),
                fmt_number(view.pnl),
                fmt_percent(view.daily_variation_percent),
            )
        )
    lines.append("")

    for asset_class, percent in sorted(portfolio.allocation.items(), key=lambda kv: kv[1], reverse=True):
        lines.append(f"{asset_class: >26} | {percent:6.2f}%")
    lines.append("")

    lines.append(f"Total value: {portfolio.total_value:.2f}")
    if previous_total:
        change = portfolio.total_value - previous_total
        lines.append(f"Change since last run: {change:+.2f} ({change / previous_total * 100:+.2f}%)")
    if update.status is not None:
        lines.append(f"Status: {update.status.value}")
    for name, message in portfolio.failures.items():
        lines.append(f"  unavailable: {name} ({message})")
    return "\n".join(lines)


def render_performance(data: Optional[PerformanceData]) -> str:
    if data is None:
        return "Performance data unavailable"
    return "\n".join(
        [
            f"YTD Performance: {fmt_percent(data.ytd)}",
            f"Monthly Performance: {fmt_percent(data.monthly)}",
            f"Recent Performance: {fmt_percent(data.recent)}",
        ]
    )


def render_series(update: SeriesUpdate) -> str:
    if not update.points:
        return "Weekly series: no data"
    values = ", ".join(f"{index}:{value:.0f}" for index, value in update.points)
    return f"Weekly series ({len(update.points)} points): {values}"
