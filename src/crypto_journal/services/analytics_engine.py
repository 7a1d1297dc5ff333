"""Analytics engine - derives journal statistics from an in-memory trade list.

Every function in this module is pure: no database access, no logging and
no clock reads. Relative periods (daily, weekly, ...) are resolved against
a reference time supplied by the caller, so identical inputs always give
identical output.

Day boundaries are computed in the calendar of the reference time. Naive
datetimes are read as wall time in that calendar; a naive reference time
is read as UTC.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from decimal import ROUND_HALF_UP, Decimal

from pydantic import ValidationError

from crypto_journal.schemas.analytics import (
    AnalyticsResult,
    BreakdownEntry,
    DashboardStats,
    Dimension,
    DistributionSlice,
    EquityPoint,
    Period,
    SummaryStats,
)
from crypto_journal.schemas.trade import TradeRecord, TradeStatus

NO_STRATEGY = "No Strategy"
UNKNOWN_EXCHANGE = "Unknown"
NO_DATA_LABEL = "No data"
DEFAULT_LABEL_FORMAT = "%b %d"

WIN_COLOR = "#22C55E"
LOSS_COLOR = "#EF4444"

ZERO = Decimal("0")
CENT = Decimal("0.01")
TENTH = Decimal("0.1")


class TradeDataError(Exception):
    """Base exception for trade records the engine cannot use."""


class InvalidTradeDateError(TradeDataError):
    """A trade's date is missing or cannot be read as a point in time."""

    def __init__(self, trade_id: str | None, value: object):
        self.trade_id = trade_id
        self.value = value
        super().__init__(f"Trade {trade_id or '<unknown>'} has an unparseable trade_date: {value!r}")


@dataclass(frozen=True)
class PeriodSelector:
    """Time window to filter trades by.

    ``start`` and ``end`` are calendar days and only apply to
    ``Period.CUSTOM``.
    """

    period: Period = Period.ALL
    start: date | None = None
    end: date | None = None

    @classmethod
    def custom(cls, start: date | None, end: date | None) -> "PeriodSelector":
        """Build a custom range selector."""
        return cls(Period.CUSTOM, start, end)


# ---------------------------------------------------------------------------
# Input coercion
# ---------------------------------------------------------------------------

def _row_field(row, name: str):
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


def to_trade_records(rows: Iterable) -> list[TradeRecord]:
    """Coerce raw rows (mappings, ORM objects or records) into TradeRecords.

    Raises:
        InvalidTradeDateError: a row's trade_date is missing or unparseable
        ValidationError: any other field fails validation
    """
    records = []
    for row in rows:
        if isinstance(row, TradeRecord):
            records.append(row)
            continue
        try:
            if isinstance(row, Mapping):
                record = TradeRecord.model_validate(row)
            else:
                record = TradeRecord.model_validate(row, from_attributes=True)
        except ValidationError as e:
            if any(err["loc"][:1] == ("trade_date",) for err in e.errors()):
                trade_id = _row_field(row, "id")
                raise InvalidTradeDateError(
                    str(trade_id) if trade_id is not None else None,
                    _row_field(row, "trade_date"),
                ) from e
            raise
        records.append(record)
    return records


# ---------------------------------------------------------------------------
# Time helpers
# ---------------------------------------------------------------------------

def reference_timezone(now: datetime) -> tzinfo:
    """Timezone whose calendar defines day boundaries."""
    return now.tzinfo or UTC


def _localize(moment: datetime, tz: tzinfo) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment


def in_zone(moment: datetime, tz: tzinfo) -> datetime:
    """Express ``moment`` as wall time in ``tz``."""
    return _localize(moment, tz).astimezone(tz)


def sort_by_trade_date(trades: Iterable[TradeRecord], tz: tzinfo = UTC) -> list[TradeRecord]:
    """Return a new list ordered oldest first; ties keep input order."""
    return sorted(trades, key=lambda t: _localize(t.trade_date, tz))


def period_bounds(
    selector: PeriodSelector,
    now: datetime,
) -> tuple[datetime | None, datetime | None] | None:
    """Resolve a selector to an inclusive (start, end) interval.

    ``None`` on either side means unbounded. Returns ``None`` when the
    selector can match nothing (a custom range missing a day).
    """
    tz = reference_timezone(now)
    today = in_zone(now, tz).date()

    def midnight(day: date) -> datetime:
        return datetime.combine(day, time.min, tzinfo=tz)

    if selector.period == Period.ALL:
        return None, None
    if selector.period == Period.DAILY:
        return midnight(today), None
    if selector.period == Period.WEEKLY:
        week_ago = in_zone(now, tz) - timedelta(days=7)
        return midnight(week_ago.date()), None
    if selector.period == Period.MONTHLY:
        return midnight(today.replace(day=1)), None
    if selector.period == Period.YEARLY:
        return midnight(date(today.year, 1, 1)), None
    if selector.period == Period.CUSTOM:
        if selector.start is None or selector.end is None:
            return None
        return (
            midnight(_as_day(selector.start)),
            datetime.combine(_as_day(selector.end), time.max, tzinfo=tz),
        )

    raise ValueError(f"Unsupported period: {selector.period}")


def _as_day(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


def filter_by_period(
    trades: Iterable[TradeRecord],
    selector: PeriodSelector,
    now: datetime,
) -> list[TradeRecord]:
    """Keep trades whose trade_date falls within the selector's interval.

    Order relative to the input is preserved.
    """
    bounds = period_bounds(selector, now)
    if bounds is None:
        return []

    start, end = bounds
    tz = reference_timezone(now)
    selected = []
    for trade in trades:
        moment = _localize(trade.trade_date, tz)
        if start is not None and moment < start:
            continue
        if end is not None and moment > end:
            continue
        selected.append(trade)
    return selected


def closed_trades(trades: Iterable[TradeRecord]) -> list[TradeRecord]:
    """Trades that participate in P&L aggregation."""
    return [t for t in trades if t.status == TradeStatus.CLOSED]


# ---------------------------------------------------------------------------
# Reducers
# ---------------------------------------------------------------------------

def _pnl(trade: TradeRecord) -> Decimal:
    return trade.pnl if trade.pnl is not None else ZERO


def round_money(value: Decimal) -> Decimal:
    """Round a monetary amount for reporting."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def win_rate(wins: int, losses: int) -> float:
    """Percentage of decided trades that won, to one decimal."""
    decided = wins + losses
    if decided == 0:
        return 0.0
    rate = Decimal(100 * wins) / Decimal(decided)
    return float(rate.quantize(TENTH, rounding=ROUND_HALF_UP))


def summarize(trades: Sequence[TradeRecord]) -> SummaryStats:
    """Reduce an already filtered set of trades to scalar metrics.

    Breakeven trades and trades without P&L count toward ``total_trades``
    only. Sums are kept at full precision and rounded once at the end.
    """
    total_pnl = ZERO
    win_total = ZERO
    loss_total = ZERO
    wins = 0
    losses = 0
    best = ZERO

    for trade in trades:
        pnl = _pnl(trade)
        total_pnl += pnl
        if pnl > 0:
            wins += 1
            win_total += pnl
        elif pnl < 0:
            losses += 1
            loss_total += pnl
        if pnl > best:
            best = pnl

    avg_win = win_total / wins if wins else ZERO
    avg_loss = loss_total / losses if losses else ZERO
    # No losses collapses to 0 rather than infinity
    profit_factor = abs(avg_win / avg_loss) if avg_loss else ZERO

    return SummaryStats(
        total_pnl=round_money(total_pnl),
        total_trades=len(trades),
        wins=wins,
        losses=losses,
        win_rate=win_rate(wins, losses),
        avg_win=round_money(avg_win),
        avg_loss=round_money(avg_loss),
        profit_factor=float(round_money(profit_factor)),
        best_trade_pnl=round_money(best),
    )


def build_equity_curve(
    trades: Iterable[TradeRecord],
    label_format: str = DEFAULT_LABEL_FORMAT,
    tz: tzinfo = UTC,
) -> list[EquityPoint]:
    """Cumulative P&L series, one point per trade in chronological order.

    An empty input yields a single "No data" point so charts always have
    an axis to draw.
    """
    ordered = sort_by_trade_date(trades, tz)
    if not ordered:
        return [
            EquityPoint(
                label=NO_DATA_LABEL,
                timestamp=None,
                trade_id=None,
                trade_pnl=round_money(ZERO),
                cumulative_pnl=round_money(ZERO),
            )
        ]

    running = ZERO
    points = []
    for trade in ordered:
        pnl = _pnl(trade)
        running += pnl
        points.append(
            EquityPoint(
                label=in_zone(trade.trade_date, tz).strftime(label_format),
                timestamp=trade.trade_date,
                trade_id=trade.id,
                trade_pnl=round_money(pnl),
                cumulative_pnl=round_money(running),
            )
        )
    return points


def _dimension_key(trade: TradeRecord, dimension: Dimension) -> str:
    if dimension == Dimension.STRATEGY:
        return trade.strategy_tag or NO_STRATEGY
    return trade.exchange or UNKNOWN_EXCHANGE


def breakdown_by(trades: Iterable[TradeRecord], dimension: Dimension) -> list[BreakdownEntry]:
    """Group trades by strategy tag or exchange.

    Groups appear in order of first occurrence. Trades missing the
    attribute land in a sentinel group instead of being dropped.
    """
    groups: dict[str, list[TradeRecord]] = {}
    for trade in trades:
        groups.setdefault(_dimension_key(trade, dimension), []).append(trade)

    entries = []
    for key, members in groups.items():
        stats = summarize(members)
        entries.append(
            BreakdownEntry(
                key=key,
                total_trades=stats.total_trades,
                wins=stats.wins,
                losses=stats.losses,
                total_pnl=stats.total_pnl,
                win_rate=stats.win_rate,
            )
        )
    return entries


def best_and_worst(
    entries: Sequence[BreakdownEntry],
) -> tuple[BreakdownEntry | None, BreakdownEntry | None]:
    """Pick the highest and lowest P&L groups.

    Each pick sorts its own copy, so the caller's list is never reordered.
    """
    if not entries:
        return None, None
    best = sorted(entries, key=lambda e: e.total_pnl, reverse=True)[0]
    worst = sorted(entries, key=lambda e: e.total_pnl)[0]
    return best, worst


def win_loss_distribution(summary: SummaryStats) -> list[DistributionSlice]:
    """Win/loss counts as chart categories, empty categories omitted."""
    slices = [
        DistributionSlice(name="Wins", value=summary.wins, color=WIN_COLOR),
        DistributionSlice(name="Losses", value=summary.losses, color=LOSS_COLOR),
    ]
    return [s for s in slices if s.value > 0]


def dashboard_stats(trades: Iterable) -> DashboardStats:
    """Headline figures over every closed trade."""
    closed = closed_trades(to_trade_records(trades))
    summary = summarize(closed)
    total = sum((_pnl(t) for t in closed), ZERO)
    avg_profit = total / len(closed) if closed else ZERO

    return DashboardStats(
        total_trades=summary.total_trades,
        win_rate=summary.win_rate,
        total_pnl=summary.total_pnl,
        avg_profit_per_trade=round_money(avg_profit),
    )


def analyze(
    trades: Iterable,
    selector: PeriodSelector,
    now: datetime,
    label_format: str = DEFAULT_LABEL_FORMAT,
) -> AnalyticsResult:
    """Run the full pipeline for one period.

    Args:
        trades: Trade rows in any order (records, mappings or ORM objects)
        selector: Period to filter by
        now: Reference time for relative periods
        label_format: strftime format for equity curve labels

    Returns:
        Fresh AnalyticsResult; nothing is cached between calls

    Raises:
        InvalidTradeDateError: a trade's date cannot be parsed
    """
    tz = reference_timezone(now)
    records = closed_trades(to_trade_records(trades))
    filtered = sort_by_trade_date(filter_by_period(records, selector, now), tz)
    summary = summarize(filtered)

    return AnalyticsResult(
        period=selector.period,
        start_date=_as_day(selector.start) if selector.start else None,
        end_date=_as_day(selector.end) if selector.end else None,
        reference_time=now,
        filtered_trades=filtered,
        summary=summary,
        equity_curve=build_equity_curve(filtered, label_format, tz),
        win_loss_distribution=win_loss_distribution(summary),
        breakdowns={
            Dimension.STRATEGY: breakdown_by(filtered, Dimension.STRATEGY),
            Dimension.EXCHANGE: breakdown_by(filtered, Dimension.EXCHANGE),
        },
    )
