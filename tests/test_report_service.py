"""Tests for report export."""

import csv
import io
from datetime import UTC, date, datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from crypto_journal.schemas.analytics import Period
from crypto_journal.services.analytics_engine import PeriodSelector, analyze
from crypto_journal.services.report_service import (
    REPORT_COLUMNS,
    REPORT_TITLE,
    build_report,
    format_money,
    report_filename,
    write_csv,
)
from tests.conftest import make_trade


@pytest.fixture
def report(now):
    """Monthly report over two closed trades and one open trade."""
    trades = [
        make_trade(
            asset_pair="ETH/USDT",
            trade_type="short",
            entry_price=Decimal("3200"),
            exit_price=Decimal("3240.5"),
            pnl=Decimal("-40.5"),
            strategy_tag="Fade",
            trade_date=datetime(2026, 3, 9, 14, 0, tzinfo=UTC),
        ),
        make_trade(
            asset_pair="BTC/USDT",
            entry_price=Decimal("61000"),
            exit_price=Decimal("62234.5"),
            pnl=Decimal("1234.5"),
            trade_date=datetime(2026, 3, 2, 8, 0, tzinfo=UTC),
        ),
        make_trade(status="open", exit_price=None, pnl=None, trade_date=datetime(2026, 3, 17, tzinfo=UTC)),
    ]
    result = analyze(trades, PeriodSelector(Period.MONTHLY), now)
    return build_report(result, generated_on=date(2026, 3, 18))


@pytest.mark.parametrize(
    "value,expected",
    [
        (Decimal("1234.5"), "$1,234.50"),
        (Decimal("-40"), "-$40.00"),
        (Decimal("0"), "$0.00"),
        (Decimal("0.005"), "$0.01"),
    ],
)
def test_format_money(value, expected):
    """Amounts are rounded to cents with the sign before the symbol."""
    assert format_money(value) == expected


def test_format_money_symbol():
    """Currency symbol is configurable."""
    assert format_money(Decimal("-3.2"), symbol="€") == "-€3.20"


def test_report_summary(report):
    """Headline lines reflect the period summary."""
    assert report.title == REPORT_TITLE
    assert report.generated_on == date(2026, 3, 18)
    assert report.summary_lines == [
        "Total P&L: $1,194.00",
        "Total Trades: 2",
        "Win Rate: 50.0%",
        "Wins: 1 | Losses: 1",
    ]


def test_report_rows_are_chronological(report):
    """One row per closed trade, oldest first; missing strategy shows a dash."""
    assert report.columns == REPORT_COLUMNS
    assert report.rows == [
        ["BTC/USDT", "long", "$61,000.00", "$62,234.50", "$1,234.50", "-", "2026-03-02"],
        ["ETH/USDT", "short", "$3,200.00", "$3,240.50", "-$40.50", "Fade", "2026-03-09"],
    ]


def test_write_csv(report):
    """CSV has the header row followed by the trade rows."""
    buffer = io.StringIO()
    write_csv(report, buffer)

    rows = list(csv.reader(io.StringIO(buffer.getvalue())))
    assert rows[0] == ["Asset", "Type", "Entry", "Exit", "P&L", "Strategy", "Date"]
    assert rows[1][0] == "BTC/USDT"
    assert rows[2][4] == "-$40.50"
    assert len(rows) == 3


def test_report_filename():
    """Download name carries the generation date."""
    assert report_filename(date(2026, 3, 18)) == "trading-report-2026-03-18.csv"


def test_report_dates_use_local_day():
    """Rows show the trade's day in the report's timezone, matching the filter."""
    new_york = ZoneInfo("America/New_York")
    now = datetime(2026, 3, 18, 9, 0, tzinfo=new_york)
    # 23:00 on the 17th in New York
    trades = [make_trade(id="x", trade_date=datetime(2026, 3, 18, 3, 0, tzinfo=UTC))]

    result = analyze(trades, PeriodSelector.custom(date(2026, 3, 17), date(2026, 3, 17)), now)
    report = build_report(result, generated_on=date(2026, 3, 18), tz=new_york)

    assert [t.id for t in result.filtered_trades] == ["x"]
    assert result.equity_curve[0].label == "Mar 17"
    assert report.rows[0][6] == "2026-03-17"
