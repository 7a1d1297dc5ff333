"""API routes for journal trades."""

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from crypto_journal.core.database import get_db
from crypto_journal.schemas.trade import (
    QuickTradeCreate,
    TradeCreate,
    TradeList,
    TradeResponse,
    TradeStatus,
    TradeUpdate,
)
from crypto_journal.services.trade_service import TradeNotFoundError, TradeService

router = APIRouter(prefix="/trades", tags=["trades"])


@router.post("", response_model=TradeResponse, status_code=201)
async def create_trade(
    data: TradeCreate,
    session: AsyncSession = Depends(get_db),
):
    """Log a trade from the advanced entry form.

    P&L is derived from entry/exit prices, quantity and fees when the
    trade is closed with an exit price.

    Args:
        data: Trade fields
        session: Database session

    Returns:
        Created trade
    """
    service = TradeService(session)
    trade = await service.create_trade(data)
    return TradeResponse.model_validate(trade)


@router.post("/quick", response_model=TradeResponse, status_code=201)
async def quick_add_trade(
    data: QuickTradeCreate,
    session: AsyncSession = Depends(get_db),
):
    """Log a closed trade from a win/loss amount.

    Args:
        data: Quick-add fields
        session: Database session

    Returns:
        Created trade
    """
    service = TradeService(session)
    trade = await service.quick_add(data)
    return TradeResponse.model_validate(trade)


@router.get("", response_model=TradeList)
async def list_trades(
    user_id: str = Query(..., description="Owner of the trades"),
    status: TradeStatus | None = Query(None, description="Filter by status"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum results"),
    offset: int = Query(0, ge=0, description="Results to skip"),
    session: AsyncSession = Depends(get_db),
):
    """List a user's trades, newest first.

    Args:
        user_id: Owner of the trades
        status: Optional status filter
        limit: Maximum number of results
        offset: Number of results to skip
        session: Database session

    Returns:
        Paginated trade list
    """
    service = TradeService(session)
    trades, total = await service.list_trades(
        user_id=user_id,
        status=status,
        limit=limit,
        offset=offset,
    )

    return TradeList(
        trades=[TradeResponse.model_validate(t) for t in trades],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/{trade_id}", response_model=TradeResponse)
async def get_trade(
    trade_id: str,
    session: AsyncSession = Depends(get_db),
):
    """Get trade by ID.

    Raises:
        HTTPException: If trade not found
    """
    service = TradeService(session)
    trade = await service.get_trade(trade_id)

    if not trade:
        raise HTTPException(status_code=404, detail="Trade not found")

    return TradeResponse.model_validate(trade)


@router.patch("/{trade_id}", response_model=TradeResponse)
async def update_trade(
    trade_id: str,
    update_data: TradeUpdate,
    session: AsyncSession = Depends(get_db),
):
    """Update trade details.

    Args:
        trade_id: Trade ID
        update_data: Fields to change
        session: Database session

    Returns:
        Updated trade

    Raises:
        HTTPException: If trade not found
    """
    service = TradeService(session)
    try:
        trade = await service.update_trade(trade_id, update_data)
    except TradeNotFoundError:
        raise HTTPException(status_code=404, detail="Trade not found")

    return TradeResponse.model_validate(trade)


@router.delete("/{trade_id}", status_code=204)
async def delete_trade(
    trade_id: str,
    session: AsyncSession = Depends(get_db),
):
    """Delete a trade.

    Raises:
        HTTPException: If trade not found
    """
    service = TradeService(session)
    try:
        await service.delete_trade(trade_id)
    except TradeNotFoundError:
        raise HTTPException(status_code=404, detail="Trade not found")

    return Response(status_code=204)
