"""Unit tests for just-in-time user provisioning."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.am_common.errors import InternalError
from src.am_gateway.user.db_models import UserModel
from src.am_gateway.user.service import UserService


def _select_result(user: UserModel | None) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = user
    return result


class TestGetOrProvision:
    async def test_existing_user_is_returned(self) -> None:
        db = AsyncMock()
        user = UserModel(id="sub-1", balance=500)
        db.execute.return_value = _select_result(user)

        assert await UserService().get_or_provision(db, "sub-1") is user
        db.execute.assert_awaited_once()
        db.commit.assert_not_awaited()

    async def test_new_subject_is_inserted_with_zero_balance(self) -> None:
        db = AsyncMock()
        created = UserModel(id="sub-2", email="n@e.w", balance=0)
        db.execute.side_effect = [_select_result(None), MagicMock(), _select_result(created)]

        user = await UserService().get_or_provision(db, "sub-2", email="n@e.w", name="New")

        assert user is created
        insert_params = db.execute.await_args_list[1].args[1]
        assert insert_params == {"id": "sub-2", "email": "n@e.w", "name": "New"}
        db.commit.assert_awaited_once()

    async def test_row_missing_after_insert_is_internal_error(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [_select_result(None), MagicMock(), _select_result(None)]

        with pytest.raises(InternalError) as exc_info:
            await UserService().get_or_provision(db, "sub-3")

        assert exc_info.value.code == 9002
        assert exc_info.value.http_status == 500
