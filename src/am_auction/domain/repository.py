"""BidRepository Protocol: append-only bid history."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.am_auction.domain.models import Bid


class BidRepositoryProtocol(Protocol):
    async def insert(
        self, db: AsyncSession, product_id: str, bidder_id: str, amount: int
    ) -> Bid: ...

    async def list_for_product(self, db: AsyncSession, product_id: str) -> list[Bid]: ...

    async def list_by_bidder(self, db: AsyncSession, bidder_id: str) -> list[Bid]: ...

    async def get_highest(self, db: AsyncSession, product_id: str) -> Bid | None: ...
