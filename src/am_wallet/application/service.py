"""WalletService: the Ledger: sole mutator of user balances.

deposit runs in its own unit of work. Bid reservations are not exposed here:
the auction engine calls the repository inside its own unit of work so the
debit commits or rolls back together with the bid.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.am_common.cents import cents_to_display
from src.am_common.database import unit_of_work
from src.am_common.errors import InvalidAmountError, UserNotFoundError
from src.am_wallet.application.schemas import (
    BalanceResponse,
    DepositResponse,
    TransactionItem,
    TransactionListResponse,
    cursor_decode,
    cursor_encode,
)
from src.am_wallet.domain.repository import WalletRepositoryProtocol
from src.am_wallet.infrastructure.persistence import WalletRepository

logger = logging.getLogger(__name__)


class WalletService:
    def __init__(self, repo: WalletRepositoryProtocol | None = None) -> None:
        self._repo: WalletRepositoryProtocol = repo or WalletRepository()

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        wallet = await self._repo.get_wallet(db, user_id)
        if wallet is None:
            raise UserNotFoundError(user_id)
        return BalanceResponse.from_cents(user_id=user_id, balance=wallet.balance)

    async def deposit(
        self, db: AsyncSession, user_id: str, amount_cents: int
    ) -> DepositResponse:
        if amount_cents <= 0:
            raise InvalidAmountError(amount_cents)
        async with unit_of_work(db):
            wallet, tx = await self._repo.deposit(db, user_id, amount_cents)
        logger.info(
            "Deposit user=%s amount=%s balance=%s tx=%s",
            user_id,
            cents_to_display(amount_cents),
            cents_to_display(wallet.balance),
            tx.id,
        )
        return DepositResponse.from_result(
            balance=wallet.balance, amount=amount_cents, tx_id=tx.id
        )

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: str | None,
        limit: int,
        tx_type: str | None,
    ) -> TransactionListResponse:
        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        txs = await self._repo.list_transactions(db, user_id, cursor_id, limit + 1, tx_type)
        has_more = len(txs) > limit
        page = txs[:limit]

        items = [
            TransactionItem(
                id=t.id,
                type=t.type,
                amount_cents=t.amount,
                amount_display=cents_to_display(t.amount),
                status=t.status,
                balance_after_cents=t.balance_after,
                reference_type=t.reference_type,
                reference_id=t.reference_id,
                created_at=t.created_at.isoformat() if t.created_at else "",
            )
            for t in page
        ]
        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return TransactionListResponse(items=items, next_cursor=next_cursor, has_more=has_more)
