"""Trade service - journal entry persistence and the engine's trade feed."""

import logging
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from crypto_journal.models.trade import Trade
from crypto_journal.schemas.trade import (
    QuickTradeCreate,
    TradeCreate,
    TradeRecord,
    TradeResult,
    TradeStatus,
    TradeType,
    TradeUpdate,
)
from crypto_journal.services.analytics_engine import to_trade_records

logger = logging.getLogger(__name__)

# Quick-add entries only know the P&L; prices are placeholders around this base
QUICK_ADD_ENTRY_PRICE = Decimal("100")

PNL_INPUT_FIELDS = {"trade_type", "entry_price", "exit_price", "quantity", "fees", "status"}


class TradeNotFoundError(Exception):
    """Raised when a trade ID does not exist."""


def calculate_pnl(
    trade_type: TradeType | str,
    entry_price: Decimal,
    exit_price: Decimal | None,
    quantity: Decimal,
    fees: Decimal = Decimal("0"),
    status: TradeStatus | str = TradeStatus.CLOSED,
) -> Decimal | None:
    """Realized P&L for an advanced entry.

    Long: (exit - entry) * qty - fees. Short: (entry - exit) * qty - fees.
    Open trades and trades without an exit price have no P&L yet.
    """
    if TradeStatus(status) != TradeStatus.CLOSED or exit_price is None:
        return None

    if TradeType(trade_type) == TradeType.LONG:
        gross = (exit_price - entry_price) * quantity
    else:
        gross = (entry_price - exit_price) * quantity
    return gross - fees


class TradeService:
    """Service for journal trade CRUD."""

    def __init__(self, session: AsyncSession):
        """Initialize trade service.

        Args:
            session: Database session
        """
        self.session = session

    async def create_trade(self, data: TradeCreate) -> Trade:
        """Create a trade from the advanced entry form.

        Args:
            data: Validated trade fields

        Returns:
            Persisted Trade with derived P&L
        """
        trade = Trade(
            user_id=data.user_id,
            asset_pair=data.asset_pair,
            trade_type=data.trade_type.value,
            entry_price=data.entry_price,
            exit_price=data.exit_price,
            quantity=data.quantity,
            fees=data.fees,
            status=data.status.value,
            pnl=calculate_pnl(
                data.trade_type,
                data.entry_price,
                data.exit_price,
                data.quantity,
                data.fees,
                data.status,
            ),
            strategy_tag=data.strategy_tag,
            exchange=data.exchange,
            notes=data.notes,
            image_url=data.image_url,
            trade_date=data.trade_date or datetime.now(UTC),
        )
        self.session.add(trade)
        await self.session.commit()
        await self.session.refresh(trade)

        logger.info(f"Created {trade.status} {trade.trade_type} trade {trade.id} on {trade.asset_pair}")
        return trade

    async def quick_add(self, data: QuickTradeCreate) -> Trade:
        """Create a closed trade from a win/loss amount.

        Entry and exit prices are synthetic so the stored prices agree with
        the P&L; quantity is 1 and fees are 0.

        Args:
            data: Quick-add fields

        Returns:
            Persisted closed Trade
        """
        pnl = data.amount if data.result == TradeResult.WIN else -data.amount
        trade = Trade(
            user_id=data.user_id,
            asset_pair=data.asset_pair,
            trade_type=TradeType.LONG.value,
            entry_price=QUICK_ADD_ENTRY_PRICE,
            exit_price=QUICK_ADD_ENTRY_PRICE + pnl,
            quantity=Decimal("1"),
            fees=Decimal("0"),
            status=TradeStatus.CLOSED.value,
            pnl=pnl,
            strategy_tag=data.strategy_tag,
            exchange=data.exchange,
            trade_date=data.trade_date or datetime.now(UTC),
        )
        self.session.add(trade)
        await self.session.commit()
        await self.session.refresh(trade)

        logger.info(f"Quick-added {data.result.value} of {data.amount} on {trade.asset_pair} ({trade.id})")
        return trade

    async def get_trade(self, trade_id: str) -> Trade | None:
        """Get trade by ID.

        Args:
            trade_id: Trade ID

        Returns:
            Trade or None if not found
        """
        stmt = select(Trade).where(Trade.id == trade_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_trades(
        self,
        user_id: str,
        status: TradeStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Trade], int]:
        """List a user's trades, newest first.

        Args:
            user_id: Owner of the trades
            status: Optional status filter
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            Tuple of (list of Trade models, total count)
        """
        stmt = select(Trade).where(Trade.user_id == user_id)
        count_stmt = select(func.count(Trade.id)).where(Trade.user_id == user_id)
        if status:
            stmt = stmt.where(Trade.status == status.value)
            count_stmt = count_stmt.where(Trade.status == status.value)

        total_result = await self.session.execute(count_stmt)
        total = total_result.scalar() or 0

        stmt = stmt.order_by(Trade.trade_date.desc()).limit(limit).offset(offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def update_trade(self, trade_id: str, data: TradeUpdate) -> Trade:
        """Apply a partial update.

        P&L is re-derived when a price, size, fee, type or status field
        changes, unless the update sets pnl explicitly.

        Args:
            trade_id: Trade ID
            data: Fields to change

        Returns:
            Updated Trade

        Raises:
            TradeNotFoundError: If the trade does not exist
        """
        trade = await self.get_trade(trade_id)
        if trade is None:
            raise TradeNotFoundError(f"Trade not found: {trade_id}")

        changes = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            if isinstance(value, (TradeType, TradeStatus)):
                value = value.value
            elif isinstance(value, str) and not value.strip():
                value = None
            setattr(trade, field, value)

        if "pnl" not in changes and PNL_INPUT_FIELDS & changes.keys():
            trade.pnl = calculate_pnl(
                trade.trade_type,
                trade.entry_price,
                trade.exit_price,
                trade.quantity,
                trade.fees,
                trade.status,
            )

        await self.session.commit()
        await self.session.refresh(trade)

        logger.info(f"Updated trade {trade_id}: {sorted(changes)}")
        return trade

    async def delete_trade(self, trade_id: str) -> None:
        """Delete a trade.

        Raises:
            TradeNotFoundError: If the trade does not exist
        """
        trade = await self.get_trade(trade_id)
        if trade is None:
            raise TradeNotFoundError(f"Trade not found: {trade_id}")

        await self.session.delete(trade)
        await self.session.commit()
        logger.info(f"Deleted trade {trade_id}")

    async def get_trade_records(
        self,
        user_id: str,
        closed_only: bool = True,
    ) -> list[TradeRecord]:
        """Fetch a user's trades as engine input, oldest first.

        Period filtering happens in the engine, in the caller's calendar.

        Args:
            user_id: Owner of the trades
            closed_only: Skip open trades

        Returns:
            List of TradeRecord
        """
        stmt = select(Trade).where(Trade.user_id == user_id)
        if closed_only:
            stmt = stmt.where(Trade.status == TradeStatus.CLOSED.value)
        stmt = stmt.order_by(Trade.trade_date)

        result = await self.session.execute(stmt)
        return to_trade_records(result.scalars().all())
