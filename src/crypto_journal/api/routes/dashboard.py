"""API routes for dashboard headline figures."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from crypto_journal.core.database import get_db
from crypto_journal.schemas.analytics import DashboardStats
from crypto_journal.services.analytics_engine import dashboard_stats
from crypto_journal.services.trade_service import TradeService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    user_id: str = Query(..., description="Owner of the trades"),
    session: AsyncSession = Depends(get_db),
):
    """Get headline stats over every closed trade.

    Args:
        user_id: Owner of the trades
        session: Database session

    Returns:
        Total trades, win rate, total P&L and average profit per trade
    """
    service = TradeService(session)
    trades = await service.get_trade_records(user_id)
    return dashboard_stats(trades)
