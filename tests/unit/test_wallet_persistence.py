# tests/unit/test_wallet_persistence.py
"""Unit tests for WalletRepository using MagicMock AsyncSession."""
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.am_common.errors import InsufficientFundsError, UserNotFoundError
from src.am_wallet.infrastructure.persistence import WalletRepository


def _wallet_row(balance: int, user_id: str = "user-1") -> MagicMock:
    row = MagicMock()
    row.user_id = user_id
    row.balance = balance
    row.updated_at = datetime.now(UTC)
    return row


def _tx_row(tx_id: int, amount: int, balance_after: int, tx_type: str) -> MagicMock:
    row = MagicMock()
    row.id = tx_id
    row.user_id = "user-1"
    row.type = tx_type
    row.amount = amount
    row.status = "completed"
    row.balance_after = balance_after
    row.reference_type = "PRODUCT" if tx_type == "BID" else "DEPOSIT"
    row.reference_id = "prod-1" if tx_type == "BID" else None
    row.created_at = datetime.now(UTC)
    return row


def _result(row: object) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = row
    return result


@pytest.fixture
def db():
    return MagicMock()


class TestDeposit:
    async def test_credits_and_appends_transaction(self, db) -> None:
        db.execute = AsyncMock(
            side_effect=[_result(_wallet_row(12500)), _result(_tx_row(1, 2500, 12500, "DEPOSIT"))]
        )
        wallet, tx = await WalletRepository().deposit(db, "user-1", 2500)

        assert wallet.balance == 12500
        assert tx.amount == 2500
        assert tx.balance_after == 12500
        insert_params = db.execute.call_args_list[1].args[1]
        assert insert_params["type"] == "DEPOSIT"
        assert insert_params["amount"] == 2500

    async def test_missing_user(self, db) -> None:
        db.execute = AsyncMock(return_value=_result(None))
        with pytest.raises(UserNotFoundError):
            await WalletRepository().deposit(db, "ghost", 2500)


class TestReserveForBid:
    async def test_debit_records_negative_amount(self, db) -> None:
        db.execute = AsyncMock(
            side_effect=[_result(_wallet_row(4000)), _result(_tx_row(2, -6000, 4000, "BID"))]
        )
        wallet, tx = await WalletRepository().reserve_for_bid(db, "user-1", 6000, "prod-1")

        assert wallet.balance == 4000
        assert tx.amount == -6000
        insert_params = db.execute.call_args_list[1].args[1]
        assert insert_params["amount"] == -6000
        assert insert_params["reference_type"] == "PRODUCT"
        assert insert_params["reference_id"] == "prod-1"

    async def test_conditional_update_miss_is_insufficient_funds(self, db) -> None:
        db.execute = AsyncMock(side_effect=[_result(None), _result(_wallet_row(3000))])
        with pytest.raises(InsufficientFundsError) as exc_info:
            await WalletRepository().reserve_for_bid(db, "user-1", 6000, "prod-1")
        assert exc_info.value.available == 3000
        assert db.execute.await_count == 2

    async def test_conditional_update_miss_without_user(self, db) -> None:
        db.execute = AsyncMock(side_effect=[_result(None), _result(None)])
        with pytest.raises(UserNotFoundError):
            await WalletRepository().reserve_for_bid(db, "ghost", 6000, "prod-1")

    async def test_balance_equal_to_amount_may_be_spent(self, db) -> None:
        db.execute = AsyncMock(
            side_effect=[_result(_wallet_row(0)), _result(_tx_row(3, -500, 0, "BID"))]
        )
        wallet, tx = await WalletRepository().reserve_for_bid(db, "user-1", 500, "prod-1")

        assert wallet.balance == 0
        assert tx.balance_after == 0
        debit_sql = " ".join(str(db.execute.call_args_list[0].args[0]).split())
        assert "balance >= :amount" in debit_sql
