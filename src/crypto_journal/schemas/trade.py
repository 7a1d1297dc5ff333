"""Pydantic schemas for trades."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TradeType(str, Enum):
    """Direction of a trade."""

    LONG = "long"
    SHORT = "short"


class TradeStatus(str, Enum):
    """Lifecycle state of a trade."""

    OPEN = "open"
    CLOSED = "closed"


class TradeResult(str, Enum):
    """Outcome picked in quick-add entry."""

    WIN = "win"
    LOSS = "loss"


def _lower(v):
    return v.strip().lower() if isinstance(v, str) else v


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class TradeRecord(BaseModel):
    """Trade as consumed by the analytics engine.

    Monetary fields are coerced to Decimal here so the aggregation code
    never sees strings or floats.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str = Field(..., description="Opaque trade identifier")
    asset_pair: str = Field(..., description="Traded pair, e.g. BTC/USDT")
    trade_type: TradeType = Field(..., description="long or short")
    entry_price: Decimal = Field(..., description="Entry price")
    exit_price: Optional[Decimal] = Field(None, description="Exit price (None while open)")
    quantity: Decimal = Field(..., description="Position size")
    fees: Decimal = Field(default=Decimal("0"), description="Fees paid")
    pnl: Optional[Decimal] = Field(None, description="Realized P&L")
    strategy_tag: Optional[str] = Field(None, description="Strategy label")
    exchange: Optional[str] = Field(None, description="Exchange name")
    status: TradeStatus = Field(..., description="open or closed")
    trade_date: datetime = Field(..., description="Point in time the trade is attributed to")
    notes: Optional[str] = Field(None, description="User notes")
    image_url: Optional[str] = Field(None, description="Screenshot URL")

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        """Accept integer ids from other stores."""
        return str(v) if isinstance(v, int) else v

    @field_validator("trade_type", "status", mode="before")
    @classmethod
    def normalize_enum(cls, v):
        """Accept enum values in any case."""
        return _lower(v)

    @field_validator("fees", mode="before")
    @classmethod
    def default_fees(cls, v):
        """Missing fees count as zero."""
        return Decimal("0") if v is None else v

    @field_validator("strategy_tag", "exchange", "notes", "image_url", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Treat empty form fields as absent."""
        return _blank_to_none(v)


class TradeCreate(BaseModel):
    """Schema for advanced trade entry.

    P&L is derived from prices, quantity and fees when the trade is closed.
    """

    user_id: str = Field(..., description="Owner of the trade", max_length=64)
    asset_pair: str = Field(..., description="Traded pair", max_length=32)
    trade_type: TradeType = Field(default=TradeType.LONG, description="long or short")
    entry_price: Decimal = Field(..., ge=0, description="Entry price")
    exit_price: Optional[Decimal] = Field(None, ge=0, description="Exit price")
    quantity: Decimal = Field(..., ge=0, description="Position size")
    fees: Decimal = Field(default=Decimal("0"), ge=0, description="Fees paid")
    status: TradeStatus = Field(default=TradeStatus.OPEN, description="open or closed")
    strategy_tag: Optional[str] = Field(None, max_length=64)
    exchange: Optional[str] = Field(None, max_length=64)
    notes: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=512)
    trade_date: Optional[datetime] = Field(None, description="Defaults to now")

    @field_validator("strategy_tag", "exchange", "notes", "image_url", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Treat empty form fields as absent."""
        return _blank_to_none(v)


class QuickTradeCreate(BaseModel):
    """Schema for quick-add entry: a win or loss amount only."""

    user_id: str = Field(..., description="Owner of the trade", max_length=64)
    asset_pair: str = Field(..., description="Traded pair", max_length=32)
    result: TradeResult = Field(..., description="win or loss")
    amount: Decimal = Field(..., ge=0, description="Absolute P&L amount")
    strategy_tag: Optional[str] = Field(None, max_length=64)
    exchange: Optional[str] = Field(None, max_length=64)
    trade_date: Optional[datetime] = Field(None, description="Defaults to now")

    @field_validator("strategy_tag", "exchange", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Treat empty form fields as absent."""
        return _blank_to_none(v)


class TradeUpdate(BaseModel):
    """Schema for updating a trade."""

    asset_pair: Optional[str] = Field(None, max_length=32)
    trade_type: Optional[TradeType] = None
    entry_price: Optional[Decimal] = Field(None, ge=0)
    exit_price: Optional[Decimal] = Field(None, ge=0)
    quantity: Optional[Decimal] = Field(None, ge=0)
    fees: Optional[Decimal] = Field(None, ge=0)
    pnl: Optional[Decimal] = None
    status: Optional[TradeStatus] = None
    strategy_tag: Optional[str] = Field(None, max_length=64)
    exchange: Optional[str] = Field(None, max_length=64)
    notes: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=512)
    trade_date: Optional[datetime] = None

    @field_validator(
        "asset_pair",
        "trade_type",
        "entry_price",
        "quantity",
        "fees",
        "status",
        "trade_date",
        mode="before",
    )
    @classmethod
    def reject_clearing_required(cls, v, info):
        """Only optional columns may be cleared; required ones can be omitted, not nulled."""
        if _blank_to_none(v) is None:
            raise ValueError(f"{info.field_name} cannot be empty")
        return v


class TradeResponse(TradeRecord):
    """Schema for trade response."""

    user_id: str = Field(..., description="Owner of the trade")
    created_at: datetime = Field(..., description="Record creation timestamp")
    updated_at: datetime = Field(..., description="Record update timestamp")


class TradeList(BaseModel):
    """Schema for list of trades."""

    trades: list[TradeResponse]
    total: int
    limit: int
    offset: int
