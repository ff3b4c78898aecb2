"""WalletRepository: concrete implementation of WalletRepositoryProtocol.

Every balance mutation is one atomic PostgreSQL UPDATE ... RETURNING followed
by the matching append-only INSERT into transactions. The UPDATE takes the
row lock on users, so concurrent mutations of one balance serialize.
A result of 0 rows means a business constraint was violated (missing user or
insufficient funds).

Transaction ownership: The CALLER (application service or auction engine) is
responsible for committing or rolling back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.am_common.enums import TransactionStatus, TransactionType
from src.am_common.errors import (
    InsufficientFundsError,
    InternalError,
    InvalidAmountError,
    UserNotFoundError,
)
from src.am_wallet.domain.models import Transaction, Wallet

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_GET_WALLET_SQL = text("""
    SELECT id AS user_id, balance, updated_at
    FROM users
    WHERE id = :user_id
""")

_CREDIT_SQL = text("""
    UPDATE users
    SET balance = balance + :amount,
        updated_at = NOW()
    WHERE id = :user_id
    RETURNING id AS user_id, balance, updated_at
""")

_DEBIT_SQL = text("""
    UPDATE users
    SET balance = balance - :amount,
        updated_at = NOW()
    WHERE id = :user_id AND balance >= :amount
    RETURNING id AS user_id, balance, updated_at
""")

_INSERT_TRANSACTION_SQL = text("""
    INSERT INTO transactions
        (user_id, type, amount, status, balance_after, reference_type, reference_id)
    VALUES
        (:user_id, :type, :amount, :status, :balance_after, :reference_type, :reference_id)
    RETURNING id, user_id, type, amount, status, balance_after,
              reference_type, reference_id, created_at
""")

_LIST_TRANSACTIONS_SQL = text("""
    SELECT id, user_id, type, amount, status, balance_after,
           reference_type, reference_id, created_at
    FROM transactions
    WHERE user_id = :user_id
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT))
      AND (CAST(:tx_type AS TEXT) IS NULL OR type = CAST(:tx_type AS TEXT))
    ORDER BY id DESC
    LIMIT :limit
""")


def _row_to_wallet(row: object) -> Wallet:
    return Wallet(
        user_id=row.user_id,  # type: ignore[attr-defined]
        balance=row.balance,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_transaction(row: object) -> Transaction:
    return Transaction(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        type=row.type,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        balance_after=row.balance_after,  # type: ignore[attr-defined]
        reference_type=row.reference_type,  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class WalletRepository:
    """Concrete repository: all balance operations atomic at the SQL level."""

    async def get_wallet(self, db: AsyncSession, user_id: str) -> Wallet | None:
        result = await db.execute(_GET_WALLET_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_wallet(row) if row else None

    async def deposit(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> tuple[Wallet, Transaction]:
        if amount <= 0:
            raise InvalidAmountError(amount)
        result = await db.execute(_CREDIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise UserNotFoundError(user_id)
        wallet = _row_to_wallet(row)
        tx = await self._append(
            db, wallet, TransactionType.DEPOSIT, amount, "DEPOSIT", None
        )
        return wallet, tx

    async def reserve_for_bid(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        listing_id: str,
    ) -> tuple[Wallet, Transaction]:
        if amount <= 0:
            raise InvalidAmountError(amount)
        result = await db.execute(_DEBIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            current = await self.get_wallet(db, user_id)
            if current is None:
                raise UserNotFoundError(user_id)
            raise InsufficientFundsError(amount, current.balance)
        wallet = _row_to_wallet(row)
        tx = await self._append(
            db, wallet, TransactionType.BID, -amount, "PRODUCT", listing_id
        )
        return wallet, tx

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        tx_type: str | None,
    ) -> list[Transaction]:
        result = await db.execute(
            _LIST_TRANSACTIONS_SQL,
            {
                "user_id": user_id,
                "cursor_id": cursor_id,
                "tx_type": tx_type,
                "limit": limit,
            },
        )
        return [_row_to_transaction(row) for row in result.fetchall()]

    async def _append(
        self,
        db: AsyncSession,
        wallet: Wallet,
        tx_type: TransactionType,
        signed_amount: int,
        reference_type: str,
        reference_id: str | None,
    ) -> Transaction:
        result = await db.execute(
            _INSERT_TRANSACTION_SQL,
            {
                "user_id": wallet.user_id,
                "type": tx_type.value,
                "amount": signed_amount,
                "status": TransactionStatus.COMPLETED.value,
                "balance_after": wallet.balance,
                "reference_type": reference_type,
                "reference_id": reference_id,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Transaction insert returned no rows")
        return _row_to_transaction(row)
