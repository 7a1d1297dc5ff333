"""Pydantic schemas for API validation and analytics view models."""

from crypto_journal.schemas.analytics import (
    AnalyticsResult,
    BreakdownEntry,
    BreakdownResponse,
    DashboardStats,
    Dimension,
    DistributionSlice,
    EquityPoint,
    Period,
    SummaryStats,
)
from crypto_journal.schemas.calendar import CalendarDay, CalendarResponse, CalendarView
from crypto_journal.schemas.report import TradeReport
from crypto_journal.schemas.trade import (
    QuickTradeCreate,
    TradeCreate,
    TradeList,
    TradeRecord,
    TradeResponse,
    TradeStatus,
    TradeType,
    TradeUpdate,
)

__all__ = [
    "AnalyticsResult",
    "BreakdownEntry",
    "BreakdownResponse",
    "DashboardStats",
    "Dimension",
    "DistributionSlice",
    "EquityPoint",
    "Period",
    "SummaryStats",
    "CalendarDay",
    "CalendarResponse",
    "CalendarView",
    "TradeReport",
    "QuickTradeCreate",
    "TradeCreate",
    "TradeList",
    "TradeRecord",
    "TradeResponse",
    "TradeStatus",
    "TradeType",
    "TradeUpdate",
]
