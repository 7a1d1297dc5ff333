"""Report service - formats analytics results for export."""

import csv
from datetime import UTC, date, tzinfo
from decimal import Decimal
from typing import TextIO

from crypto_journal.schemas.analytics import AnalyticsResult
from crypto_journal.schemas.report import TradeReport
from crypto_journal.schemas.trade import TradeRecord
from crypto_journal.services.analytics_engine import in_zone, round_money

REPORT_TITLE = "Trading P&L Report"
REPORT_COLUMNS = ["Asset", "Type", "Entry", "Exit", "P&L", "Strategy", "Date"]
MISSING = "-"


def format_money(value: Decimal, symbol: str = "$") -> str:
    """Format an amount as currency, e.g. ``$1,234.50`` or ``-$40.00``."""
    amount = round_money(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def _trade_row(trade: TradeRecord, symbol: str, date_format: str, tz: tzinfo) -> list[str]:
    return [
        trade.asset_pair,
        trade.trade_type.value,
        format_money(trade.entry_price, symbol),
        format_money(trade.exit_price, symbol) if trade.exit_price is not None else MISSING,
        format_money(trade.pnl, symbol) if trade.pnl is not None else MISSING,
        trade.strategy_tag or MISSING,
        in_zone(trade.trade_date, tz).strftime(date_format),
    ]


def build_report(
    result: AnalyticsResult,
    generated_on: date,
    currency_symbol: str = "$",
    date_format: str = "%Y-%m-%d",
    tz: tzinfo = UTC,
) -> TradeReport:
    """Build the export table for an analytics result.

    Args:
        result: Analytics for the period being exported
        generated_on: Date stamped on the report
        currency_symbol: Symbol prefixed to amounts
        date_format: strftime format for the Date column
        tz: Timezone whose calendar day is printed for each trade

    Returns:
        TradeReport with summary lines and one row per filtered trade
    """
    summary = result.summary
    summary_lines = [
        f"Total P&L: {format_money(summary.total_pnl, currency_symbol)}",
        f"Total Trades: {summary.total_trades}",
        f"Win Rate: {summary.win_rate:.1f}%",
        f"Wins: {summary.wins} | Losses: {summary.losses}",
    ]

    return TradeReport(
        title=REPORT_TITLE,
        generated_on=generated_on,
        summary_lines=summary_lines,
        columns=list(REPORT_COLUMNS),
        rows=[_trade_row(t, currency_symbol, date_format, tz) for t in result.filtered_trades],
    )


def report_filename(generated_on: date, extension: str = "csv") -> str:
    """Download name for a report."""
    return f"trading-report-{generated_on.isoformat()}.{extension}"


def write_csv(report: TradeReport, stream: TextIO) -> None:
    """Write the report table to ``stream`` as CSV (header row first)."""
    writer = csv.writer(stream)
    writer.writerow(report.columns)
    writer.writerows(report.rows)
