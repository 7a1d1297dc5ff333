"""Trade model - one journal entry logged by a user."""

import uuid
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DateTime, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from crypto_journal.core.database import Base


def utcnow() -> datetime:
    """Return current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def new_trade_id() -> str:
    """Generate an opaque trade identifier."""
    return str(uuid.uuid4())


class Trade(Base):
    """Journal trade - the store the analytics engine reads from."""

    __tablename__ = "trades"
    __table_args__ = {"extend_existing": True}

    # Primary key
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_trade_id)

    # Owner
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    # Trade identification
    asset_pair: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    trade_type: Mapped[str] = mapped_column(String(10), nullable=False)
    # Trade types: long, short

    status: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    # Status: open, closed

    # Prices and size
    entry_price: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)
    exit_price: Mapped[Decimal | None] = mapped_column(Numeric(20, 8))
    quantity: Mapped[Decimal] = mapped_column(Numeric(28, 10), nullable=False)
    fees: Mapped[Decimal] = mapped_column(Numeric(20, 8), default=Decimal("0"), nullable=False)

    # Realized result (None while open)
    pnl: Mapped[Decimal | None] = mapped_column(Numeric(20, 8))

    # Breakdown dimensions
    strategy_tag: Mapped[str | None] = mapped_column(String(64), index=True)
    exchange: Mapped[str | None] = mapped_column(String(64), index=True)

    # Timestamps (timezone-aware)
    trade_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    # Additional metadata
    notes: Mapped[str | None] = mapped_column(Text)
    image_url: Mapped[str | None] = mapped_column(String(512))

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Trade(id={self.id}, "
            f"asset_pair={self.asset_pair}, "
            f"type={self.trade_type}, "
            f"status={self.status}, "
            f"pnl={self.pnl})>"
        )
