"""Load a sample crypto trade history for trying out the analytics views."""

import asyncio
from datetime import UTC, datetime, timedelta
from decimal import Decimal

from sqlalchemy import delete

from crypto_journal.core.database import AsyncSessionLocal, init_db
from crypto_journal.models.trade import Trade
from crypto_journal.schemas.trade import (
    QuickTradeCreate,
    TradeCreate,
    TradeResult,
    TradeStatus,
    TradeType,
)
from crypto_journal.services.trade_service import TradeService

SAMPLE_USER = "demo"


async def load_sample_data():
    """Replace the demo user's trades with a month of sample activity."""
    await init_db()

    async with AsyncSessionLocal() as session:
        print("Clearing existing demo trades...")
        await session.execute(delete(Trade).where(Trade.user_id == SAMPLE_USER))
        await session.commit()

        service = TradeService(session)
        now = datetime.now(UTC)

        advanced = [
            # (days ago, pair, type, entry, exit, qty, fees, strategy, exchange)
            (28, "BTC/USDT", TradeType.LONG, "61250", "63400", "0.15", "9.20", "Breakout", "Binance"),
            (25, "ETH/USDT", TradeType.SHORT, "3420", "3515", "2", "4.10", "Mean Reversion", "Bybit"),
            (21, "SOL/USDT", TradeType.LONG, "142.5", "151.8", "40", "3.40", "Breakout", "Binance"),
            (17, "BTC/USDT", TradeType.SHORT, "64800", "63950", "0.1", "6.50", "Scalp", "Coinbase"),
            (12, "ETH/USDT", TradeType.LONG, "3380", "3310", "1.5", "3.00", "Breakout", "Binance"),
            (8, "DOGE/USDT", TradeType.LONG, "0.1584", "0.1722", "15000", "2.25", None, "Kraken"),
            (3, "SOL/USDT", TradeType.SHORT, "156.2", "149.9", "25", "2.80", "Scalp", None),
        ]

        for days_ago, pair, trade_type, entry, exit_, qty, fees, strategy, exchange in advanced:
            await service.create_trade(TradeCreate(
                user_id=SAMPLE_USER,
                asset_pair=pair,
                trade_type=trade_type,
                entry_price=Decimal(entry),
                exit_price=Decimal(exit_),
                quantity=Decimal(qty),
                fees=Decimal(fees),
                status=TradeStatus.CLOSED,
                strategy_tag=strategy,
                exchange=exchange,
                trade_date=now - timedelta(days=days_ago),
            ))

        # Quick-logged results
        await service.quick_add(QuickTradeCreate(
            user_id=SAMPLE_USER,
            asset_pair="AVAX/USDT",
            result=TradeResult.WIN,
            amount=Decimal("85"),
            strategy_tag="Scalp",
            exchange="Bybit",
            trade_date=now - timedelta(days=5),
        ))
        await service.quick_add(QuickTradeCreate(
            user_id=SAMPLE_USER,
            asset_pair="LINK/USDT",
            result=TradeResult.LOSS,
            amount=Decimal("42.5"),
            strategy_tag="Mean Reversion",
            exchange="Binance",
            trade_date=now - timedelta(days=1),
        ))

        # Still open, shows on the calendar but not in P&L
        await service.create_trade(TradeCreate(
            user_id=SAMPLE_USER,
            asset_pair="BTC/USDT",
            trade_type=TradeType.LONG,
            entry_price=Decimal("66100"),
            quantity=Decimal("0.05"),
            strategy_tag="Breakout",
            exchange="Binance",
            trade_date=now - timedelta(hours=6),
        ))

        trades, total = await service.list_trades(SAMPLE_USER)
        print(f"\nLoaded {total} trades for user '{SAMPLE_USER}':")
        for trade in trades:
            pnl = f"{trade.pnl:.2f}" if trade.pnl is not None else "open"
            print(f"  {trade.trade_date:%Y-%m-%d}  {trade.asset_pair:<10} {trade.trade_type:<5} {pnl}")


if __name__ == "__main__":
    asyncio.run(load_sample_data())
