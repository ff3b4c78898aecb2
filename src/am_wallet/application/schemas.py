"""Pydantic schemas and cursor utilities for am_wallet API."""

import base64
import json

from pydantic import BaseModel, Field

from src.am_common.cents import cents_to_display
from src.am_common.enums import TransactionType

# ---------------------------------------------------------------------------
# Cursor-based pagination utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_id: int) -> str:
    """Encode a BIGINT primary key into an opaque Base64 cursor string."""
    payload = json.dumps({"id": last_id})
    return base64.b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Decode a cursor string back to the last seen id. Returns None on error."""
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.b64decode(cursor.encode()).decode())
        return int(payload["id"])
    except (ValueError, KeyError, TypeError):
        return None


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class DepositRequest(BaseModel):
    amount_cents: int = Field(..., gt=0, description="Amount to add to the wallet in cents")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    user_id: str
    balance_cents: int
    balance_display: str

    @classmethod
    def from_cents(cls, user_id: str, balance: int) -> "BalanceResponse":
        return cls(
            user_id=user_id,
            balance_cents=balance,
            balance_display=cents_to_display(balance),
        )


class DepositResponse(BaseModel):
    balance_cents: int
    balance_display: str
    deposited_cents: int
    deposited_display: str
    transaction_id: int
    message: str

    @classmethod
    def from_result(cls, balance: int, amount: int, tx_id: int) -> "DepositResponse":
        return cls(
            balance_cents=balance,
            balance_display=cents_to_display(balance),
            deposited_cents=amount,
            deposited_display=cents_to_display(amount),
            transaction_id=tx_id,
            message=f"Successfully added {cents_to_display(amount)} to your wallet",
        )


class TransactionItem(BaseModel):
    id: int
    type: TransactionType
    amount_cents: int
    amount_display: str
    status: str
    balance_after_cents: int
    reference_type: str | None
    reference_id: str | None
    created_at: str  # ISO8601 string


class TransactionListResponse(BaseModel):
    items: list[TransactionItem]
    next_cursor: str | None
    has_more: bool
