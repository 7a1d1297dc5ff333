"""Schemas for the daily P&L calendar."""

from __future__ import annotations

from datetime import date as date_type
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class CalendarView(str, Enum):
    """Calendar granularity."""

    MONTH = "month"
    WEEK = "week"


class CalendarDay(BaseModel):
    """One cell of the calendar grid."""

    date: date_type = Field(..., description="Date")
    trades_count: int = Field(..., description="Trades attributed to this day")
    total_pnl: Decimal = Field(..., description="Realized P&L of closed trades on this day")
    trade_ids: list[str] = Field(default_factory=list, description="Trades on this day")
    in_current_month: bool = Field(..., description="Whether the day is inside the viewed range (always true in week view)")
    is_today: bool = Field(..., description="Whether the day is today")


class CalendarResponse(BaseModel):
    """Calendar grid for a month or week."""

    view: CalendarView = Field(..., description="month or week")
    anchor: date_type = Field(..., description="Date the view is centered on")
    title: str = Field(..., description="Heading, e.g. 'October 2026'")
    range_start: date_type = Field(..., description="First day whose trades are included")
    range_end: date_type = Field(..., description="Last day whose trades are included")
    days: list[CalendarDay] = Field(..., description="Grid days, Sunday first")
    total_pnl: Decimal = Field(..., description="Realized P&L over the range")
    trading_days: int = Field(..., description="Days in range with at least one trade")
    previous_anchor: date_type = Field(..., description="Anchor for the previous page")
    next_anchor: date_type = Field(..., description="Anchor for the next page")
