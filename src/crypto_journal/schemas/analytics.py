"""Schemas for trade analytics view models."""

from __future__ import annotations

from datetime import date as date_type
from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from .trade import TradeRecord


class Period(str, Enum):
    """Time window applied before aggregation."""

    ALL = "all"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"


class Dimension(str, Enum):
    """Categorical attribute used for breakdowns."""

    STRATEGY = "strategy"
    EXCHANGE = "exchange"


class SummaryStats(BaseModel):
    """Scalar metrics for a set of closed trades."""

    total_pnl: Decimal = Field(..., description="Sum of realized P&L")
    total_trades: int = Field(..., description="Trades in the set, including breakeven")
    wins: int = Field(..., description="Trades with positive P&L")
    losses: int = Field(..., description="Trades with negative P&L")
    win_rate: float = Field(..., description="Win rate percentage over decided trades")
    avg_win: Decimal = Field(..., description="Average winning trade P&L")
    avg_loss: Decimal = Field(..., description="Average losing trade P&L (negative)")
    profit_factor: float = Field(..., description="|avg win / avg loss|, 0 without losses")
    best_trade_pnl: Decimal = Field(..., description="Largest trade P&L, floored at zero")


class EquityPoint(BaseModel):
    """Single point in the cumulative P&L series."""

    label: str = Field(..., description="Formatted trade date")
    timestamp: datetime | None = Field(None, description="Raw trade date (None for the empty sentinel)")
    trade_id: str | None = Field(None, description="Trade ID")
    trade_pnl: Decimal = Field(..., description="P&L for this trade")
    cumulative_pnl: Decimal = Field(..., description="Cumulative P&L up to this point")


class DistributionSlice(BaseModel):
    """One plottable category of the win/loss distribution."""

    name: str = Field(..., description="Category name")
    value: int = Field(..., description="Number of trades")
    color: str = Field(..., description="Hex color for charts")


class BreakdownEntry(BaseModel):
    """Statistics for one value of a breakdown dimension."""

    key: str = Field(..., description="Strategy tag or exchange name")
    total_trades: int = Field(..., description="Trades in this group")
    wins: int = Field(..., description="Winning trades")
    losses: int = Field(..., description="Losing trades")
    total_pnl: Decimal = Field(..., description="Total P&L")
    win_rate: float = Field(..., description="Win rate percentage")


class BreakdownResponse(BaseModel):
    """Breakdown for one dimension with best/worst picks."""

    dimension: Dimension = Field(..., description="Grouping dimension")
    entries: list[BreakdownEntry] = Field(..., description="Groups in order of first appearance")
    best: BreakdownEntry | None = Field(None, description="Group with the highest P&L")
    worst: BreakdownEntry | None = Field(None, description="Group with the lowest P&L")


class AnalyticsResult(BaseModel):
    """Everything a view needs for one period of trades."""

    period: Period = Field(..., description="Period the trades were filtered by")
    start_date: date_type | None = Field(None, description="Custom period start")
    end_date: date_type | None = Field(None, description="Custom period end")
    reference_time: datetime = Field(..., description="'Now' used for relative periods")
    filtered_trades: list[TradeRecord] = Field(..., description="Closed trades in the period, oldest first")
    summary: SummaryStats
    equity_curve: list[EquityPoint] = Field(..., description="Cumulative P&L series")
    win_loss_distribution: list[DistributionSlice] = Field(..., description="Non-empty win/loss categories")
    breakdowns: dict[Dimension, list[BreakdownEntry]] = Field(
        ..., description="Per-dimension breakdowns"
    )


class DashboardStats(BaseModel):
    """Headline figures for the dashboard cards."""

    total_trades: int = Field(..., description="Closed trades")
    win_rate: float = Field(..., description="Win rate percentage")
    total_pnl: Decimal = Field(..., description="Total realized P&L")
    avg_profit_per_trade: Decimal = Field(..., description="Total P&L divided by trade count")


class AnalyticsComputeRequest(BaseModel):
    """Stateless analytics request carrying its own trades."""

    trades: list[dict] = Field(..., description="Raw trade rows")
    period: Period = Field(default=Period.ALL, description="Period selector")
    start_date: date_type | None = Field(None, description="Custom period start")
    end_date: date_type | None = Field(None, description="Custom period end")
    reference_time: datetime | None = Field(None, description="Overrides 'now' for relative periods")
