"""Domain models for am_wallet: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Wallet:
    user_id: str
    balance: int             # cents, never negative
    updated_at: datetime | None = None


@dataclass
class Transaction:
    id: int                          # BIGSERIAL
    user_id: str
    type: str                        # TransactionType value
    amount: int                      # cents, positive=deposit negative=bid reservation
    status: str
    balance_after: int               # cents, balance snapshot after op
    reference_type: str | None = None
    reference_id: str | None = None
    created_at: datetime | None = None
