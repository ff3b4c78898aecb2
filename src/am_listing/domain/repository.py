"""ListingRepository Protocol: persistence contract for products.

set_ai_status, expire_stale_verifications and raise_current_price are the only
writers of verdict and price columns; get_for_update must hold a row lock
until the caller commits.
"""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.am_common.enums import AIStatus
from src.am_listing.domain.models import Listing, NewListing


class ListingRepositoryProtocol(Protocol):
    async def create(self, db: AsyncSession, new: NewListing) -> Listing: ...

    async def get_by_id(self, db: AsyncSession, listing_id: str) -> Listing | None: ...

    async def get_for_update(self, db: AsyncSession, listing_id: str) -> Listing | None: ...

    async def list_active(
        self,
        db: AsyncSession,
        category: str | None,
        search: str | None,
        min_price: int | None,
        max_price: int | None,
        limit: int,
    ) -> list[Listing]: ...

    async def list_by_seller(self, db: AsyncSession, seller_id: str) -> list[Listing]: ...

    async def set_ai_status(
        self,
        db: AsyncSession,
        listing_id: str,
        status: AIStatus,
        message: str | None,
    ) -> Listing | None: ...

    async def raise_current_price(
        self, db: AsyncSession, listing_id: str, amount: int
    ) -> int | None: ...

    async def expire_stale_verifications(
        self, db: AsyncSession, updated_before: datetime, message: str
    ) -> list[Listing]: ...
