"""Global enums: must match DB CHECK constraints exactly."""

from enum import Enum


class AIStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_AI_STATUSES


TERMINAL_AI_STATUSES: frozenset[AIStatus] = frozenset(
    {AIStatus.ACCEPTED, AIStatus.REJECTED, AIStatus.ERROR}
)


class TransactionType(str, Enum):
    DEPOSIT = "DEPOSIT"
    BID = "BID"


class TransactionStatus(str, Enum):
    COMPLETED = "completed"


class AuctionPhase(str, Enum):
    """Bidding eligibility derived from ai_status and end_time."""
    AWAITING_VERIFICATION = "AWAITING_VERIFICATION"
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    REJECTED = "REJECTED"
