"""API routes for trade analytics and statistics."""

import logging
from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from crypto_journal.config import get_settings
from crypto_journal.core.clock import get_now
from crypto_journal.core.database import get_db
from crypto_journal.schemas.analytics import (
    AnalyticsComputeRequest,
    AnalyticsResult,
    BreakdownResponse,
    Dimension,
    Period,
)
from crypto_journal.services.analytics_engine import (
    InvalidTradeDateError,
    PeriodSelector,
    analyze,
    best_and_worst,
)
from crypto_journal.services.trade_service import TradeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["analytics"])


def build_selector(
    period: Period | None,
    start_date: date | None,
    end_date: date | None,
) -> PeriodSelector:
    """Turn query parameters into a period selector."""
    if period is None:
        period = get_settings().default_period
    return PeriodSelector(period=period, start=start_date, end=end_date)


@router.get("", response_model=AnalyticsResult)
async def get_analytics(
    user_id: str = Query(..., description="Owner of the trades"),
    period: Period | None = Query(None, description="Period filter (defaults to the configured period)"),
    start_date: date | None = Query(None, description="Custom period start (YYYY-MM-DD)"),
    end_date: date | None = Query(None, description="Custom period end (YYYY-MM-DD)"),
    session: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Get the full analytics view for a period.

    Returns the closed trades in the period together with summary
    statistics, equity curve, win/loss distribution and strategy and
    exchange breakdowns.

    Args:
        user_id: Owner of the trades
        period: daily, weekly, monthly, yearly, custom or all
        start_date: Custom period start
        end_date: Custom period end
        session: Database session
        now: Reference time for relative periods

    Returns:
        Analytics result
    """
    service = TradeService(session)
    trades = await service.get_trade_records(user_id)

    return analyze(
        trades,
        build_selector(period, start_date, end_date),
        now,
        label_format=get_settings().equity_label_format,
    )


@router.get("/breakdown/{dimension}", response_model=BreakdownResponse)
async def get_breakdown(
    dimension: Dimension,
    user_id: str = Query(..., description="Owner of the trades"),
    period: Period | None = Query(None, description="Period filter"),
    start_date: date | None = Query(None, description="Custom period start (YYYY-MM-DD)"),
    end_date: date | None = Query(None, description="Custom period end (YYYY-MM-DD)"),
    session: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Get performance grouped by strategy or exchange.

    Groups keep the order in which they first appear; best and worst are
    picked by total P&L.

    Args:
        dimension: strategy or exchange
        user_id: Owner of the trades
        period: Period filter
        start_date: Custom period start
        end_date: Custom period end
        session: Database session
        now: Reference time for relative periods

    Returns:
        Breakdown entries with best and worst groups
    """
    service = TradeService(session)
    trades = await service.get_trade_records(user_id)
    result = analyze(trades, build_selector(period, start_date, end_date), now)

    entries = result.breakdowns[dimension]
    best, worst = best_and_worst(entries)

    return BreakdownResponse(
        dimension=dimension,
        entries=entries,
        best=best,
        worst=worst,
    )


@router.post("/compute", response_model=AnalyticsResult)
async def compute_analytics(
    request: AnalyticsComputeRequest,
    now: datetime = Depends(get_now),
):
    """Compute analytics over trades supplied in the request body.

    Nothing is read from or written to the database.

    Args:
        request: Trades plus period selector
        now: Reference time used when the request does not pin one

    Returns:
        Analytics result

    Raises:
        HTTPException: 422 if a trade record is malformed
    """
    selector = PeriodSelector(
        period=request.period,
        start=request.start_date,
        end=request.end_date,
    )

    try:
        return analyze(
            request.trades,
            selector,
            request.reference_time or now,
            label_format=get_settings().equity_label_format,
        )
    except InvalidTradeDateError as e:
        logger.warning(f"Rejected analytics request: {e}")
        raise HTTPException(
            status_code=422,
            detail={"message": str(e), "trade_id": e.trade_id},
        )
    except ValidationError as e:
        logger.warning(f"Rejected analytics request: {e.error_count()} invalid field(s)")
        raise HTTPException(status_code=422, detail=str(e))
