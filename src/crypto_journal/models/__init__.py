"""SQLAlchemy database models."""

from crypto_journal.models.trade import Trade

__all__ = [
    "Trade",
]
