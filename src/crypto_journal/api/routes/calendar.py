"""API routes for the daily P&L calendar."""

from datetime import date, datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from crypto_journal.core.clock import get_now
from crypto_journal.core.database import get_db
from crypto_journal.schemas.calendar import CalendarResponse, CalendarView
from crypto_journal.services.analytics_engine import in_zone, reference_timezone
from crypto_journal.services.calendar_service import build_calendar
from crypto_journal.services.trade_service import TradeService

router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.get("", response_model=CalendarResponse)
async def get_calendar(
    user_id: str = Query(..., description="Owner of the trades"),
    view: CalendarView = Query(CalendarView.MONTH, description="month or week"),
    anchor: date | None = Query(None, description="Any date in the month or week to show (defaults to today)"),
    session: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Get trades and P&L grouped by day for a month or week.

    Open trades appear in the day counts but not in P&L.

    Args:
        user_id: Owner of the trades
        view: Month or week grid
        anchor: Date the grid is built around
        session: Database session
        now: Reference time for "today"

    Returns:
        Calendar grid with navigation anchors
    """
    tz = reference_timezone(now)
    today = in_zone(now, tz).date()

    service = TradeService(session)
    trades = await service.get_trade_records(user_id, closed_only=False)

    return build_calendar(trades, anchor or today, view, today=today, tz=tz)
