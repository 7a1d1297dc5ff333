"""Calendar service - lays trades out on a month or week grid of daily P&L."""

import calendar
from collections import defaultdict
from collections.abc import Iterable
from datetime import UTC, date, timedelta, tzinfo
from decimal import Decimal

from crypto_journal.schemas.calendar import CalendarDay, CalendarResponse, CalendarView
from crypto_journal.schemas.trade import TradeRecord, TradeStatus
from crypto_journal.services.analytics_engine import in_zone, round_money, to_trade_records


def start_of_week(day: date) -> date:
    """Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def end_of_week(day: date) -> date:
    """Saturday on or after ``day``."""
    return start_of_week(day) + timedelta(days=6)


def _end_of_month(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def view_range(anchor: date, view: CalendarView) -> tuple[date, date]:
    """Days whose trades belong to the view (inclusive)."""
    if view == CalendarView.MONTH:
        return anchor.replace(day=1), _end_of_month(anchor)
    return start_of_week(anchor), end_of_week(anchor)


def grid_days(anchor: date, view: CalendarView) -> list[date]:
    """Days rendered in the grid; month views are padded to whole weeks."""
    first, last = view_range(anchor, view)
    if view == CalendarView.MONTH:
        first, last = start_of_week(first), end_of_week(last)
    return [first + timedelta(days=i) for i in range((last - first).days + 1)]


def shift_anchor(anchor: date, view: CalendarView, steps: int) -> date:
    """Move the anchor by ``steps`` months or weeks."""
    if view == CalendarView.WEEK:
        return anchor + timedelta(weeks=steps)

    month_index = anchor.year * 12 + (anchor.month - 1) + steps
    year, month = divmod(month_index, 12)
    last_day = calendar.monthrange(year, month + 1)[1]
    return date(year, month + 1, min(anchor.day, last_day))


def calendar_title(anchor: date, view: CalendarView) -> str:
    """Heading shown above the grid."""
    if view == CalendarView.MONTH:
        return anchor.strftime("%B %Y")
    return start_of_week(anchor).strftime("Week of %b %d, %Y")


def build_calendar(
    trades: Iterable,
    anchor: date,
    view: CalendarView,
    today: date,
    tz: tzinfo = UTC,
) -> CalendarResponse:
    """Build the calendar grid around ``anchor``.

    Every trade is counted on its local day; only closed trades add to
    the P&L figures.

    Args:
        trades: Trade rows in any order
        anchor: Any date inside the month or week to show
        view: Month or week grid
        today: Local date used to flag the current day
        tz: Timezone whose calendar days trades are grouped by

    Returns:
        CalendarResponse with one entry per grid day
    """
    range_start, range_end = view_range(anchor, view)

    by_date: dict[date, list[TradeRecord]] = defaultdict(list)
    for trade in to_trade_records(trades):
        day = in_zone(trade.trade_date, tz).date()
        if range_start <= day <= range_end:
            by_date[day].append(trade)

    days = []
    for day in grid_days(anchor, view):
        day_trades = by_date.get(day, [])
        day_pnl = sum(
            (t.pnl for t in day_trades if t.status == TradeStatus.CLOSED and t.pnl is not None),
            Decimal("0"),
        )
        days.append(CalendarDay(
            date=day,
            trades_count=len(day_trades),
            total_pnl=round_money(day_pnl),
            trade_ids=[t.id for t in day_trades],
            in_current_month=view == CalendarView.WEEK or day.month == anchor.month,
            is_today=day == today,
        ))

    total_pnl = sum(
        (
            t.pnl
            for day_trades in by_date.values()
            for t in day_trades
            if t.status == TradeStatus.CLOSED and t.pnl is not None
        ),
        Decimal("0"),
    )

    return CalendarResponse(
        view=view,
        anchor=anchor,
        title=calendar_title(anchor, view),
        range_start=range_start,
        range_end=range_end,
        days=days,
        total_pnl=round_money(total_pnl),
        trading_days=len(by_date),
        previous_anchor=shift_anchor(anchor, view, -1),
        next_anchor=shift_anchor(anchor, view, 1),
    )
