"""Admin application service."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.am_admin.domain.invariants import verify_marketplace_invariants
from src.am_listing.application.status_service import VerificationStatusStore


class AdminService:
    def __init__(self, status_store: VerificationStatusStore | None = None) -> None:
        self._status_store = status_store or VerificationStatusStore()

    async def sweep_stale_verifications(
        self, db: AsyncSession, older_than_seconds: int | None = None
    ) -> dict[str, Any]:
        expired = await self._status_store.sweep_stale(db, older_than_seconds)
        return {"expired_count": len(expired), "product_ids": expired}

    async def verify_all_invariants(self, db: AsyncSession) -> dict[str, object]:
        violations = await verify_marketplace_invariants(db)
        return {"ok": len(violations) == 0, "violations": violations}
