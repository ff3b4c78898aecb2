"""Local user records for identities authenticated by the external provider.

Registration happens at the provider. The first authenticated request of a
new subject provisions its `users` row with a zero balance.
"""

import logging

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.am_common.database import unit_of_work
from src.am_common.errors import InternalError
from src.am_gateway.user.db_models import UserModel

logger = logging.getLogger(__name__)

_PROVISION_SQL = text("""
    INSERT INTO users (id, email, name, balance)
    VALUES (:id, :email, :name, 0)
    ON CONFLICT (id) DO NOTHING
""")


class UserService:
    """Stateless service: instantiate once, reuse across requests."""

    async def get_or_provision(
        self,
        db: AsyncSession,
        subject: str,
        email: str | None = None,
        name: str | None = None,
    ) -> UserModel:
        user = await self._get(db, subject)
        if user is not None:
            return user

        # ON CONFLICT makes two first requests of the same subject safe
        async with unit_of_work(db):
            await db.execute(_PROVISION_SQL, {"id": subject, "email": email, "name": name})
        logger.info("Provisioned user %s", subject)

        user = await self._get(db, subject)
        if user is None:
            raise InternalError(f"User {subject} missing right after provisioning")
        return user

    async def _get(self, db: AsyncSession, subject: str) -> UserModel | None:
        result = await db.execute(select(UserModel).where(UserModel.id == subject))
        return result.scalar_one_or_none()
