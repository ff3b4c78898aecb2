"""WalletRepository Protocol: balance and ledger persistence contract.

Every balance change is paired with one appended transactions row in the
caller's unit of work.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.am_wallet.domain.models import Transaction, Wallet


class WalletRepositoryProtocol(Protocol):
    async def get_wallet(self, db: AsyncSession, user_id: str) -> Wallet | None: ...

    async def deposit(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> tuple[Wallet, Transaction]: ...

    async def reserve_for_bid(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        listing_id: str,
    ) -> tuple[Wallet, Transaction]: ...

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        tx_type: str | None,
    ) -> list[Transaction]: ...
