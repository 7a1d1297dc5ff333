"""API routes for exporting P&L reports."""

import io
from datetime import date, datetime

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from crypto_journal.api.routes.analytics import build_selector
from crypto_journal.config import get_settings
from crypto_journal.core.clock import get_now
from crypto_journal.core.database import get_db
from crypto_journal.schemas.analytics import Period
from crypto_journal.schemas.report import TradeReport
from crypto_journal.services.analytics_engine import analyze, in_zone, reference_timezone
from crypto_journal.services.report_service import build_report, report_filename, write_csv
from crypto_journal.services.trade_service import TradeService

router = APIRouter(prefix="/reports", tags=["reports"])


async def _build_trade_report(
    session: AsyncSession,
    user_id: str,
    period: Period | None,
    start_date: date | None,
    end_date: date | None,
    now: datetime,
) -> TradeReport:
    settings = get_settings()
    service = TradeService(session)
    trades = await service.get_trade_records(user_id)

    result = analyze(
        trades,
        build_selector(period, start_date, end_date),
        now,
        label_format=settings.equity_label_format,
    )
    tz = reference_timezone(now)
    generated_on = in_zone(now, tz).date()
    return build_report(result, generated_on, currency_symbol=settings.currency_symbol, tz=tz)


@router.get("/trades", response_model=TradeReport)
async def get_trade_report(
    user_id: str = Query(..., description="Owner of the trades"),
    period: Period | None = Query(None, description="Period filter"),
    start_date: date | None = Query(None, description="Custom period start (YYYY-MM-DD)"),
    end_date: date | None = Query(None, description="Custom period end (YYYY-MM-DD)"),
    session: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Get the P&L report for a period as a formatted table.

    Args:
        user_id: Owner of the trades
        period: Period filter
        start_date: Custom period start
        end_date: Custom period end
        session: Database session
        now: Reference time for relative periods

    Returns:
        Report with summary lines and trade rows
    """
    return await _build_trade_report(session, user_id, period, start_date, end_date, now)


@router.get("/trades.csv")
async def download_trade_report(
    user_id: str = Query(..., description="Owner of the trades"),
    period: Period | None = Query(None, description="Period filter"),
    start_date: date | None = Query(None, description="Custom period start (YYYY-MM-DD)"),
    end_date: date | None = Query(None, description="Custom period end (YYYY-MM-DD)"),
    session: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Download the P&L report for a period as CSV."""
    report = await _build_trade_report(session, user_id, period, start_date, end_date, now)

    buffer = io.StringIO()
    write_csv(report, buffer)

    return Response(
        content=buffer.getvalue(),
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{report_filename(report.generated_on)}"',
        },
    )
