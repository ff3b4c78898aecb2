"""BidRepository: append-only access to the bids table.

Inserts run inside the auction engine's transaction; there is no UPDATE or
DELETE statement for bids anywhere.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.am_auction.domain.models import Bid
from src.am_common.errors import InternalError

_INSERT_BID_SQL = text("""
    INSERT INTO bids (product_id, bidder_id, amount)
    VALUES (:product_id, :bidder_id, :amount)
    RETURNING id, product_id, bidder_id, amount, created_at
""")

# Ties on amount cannot happen (each accepted bid is strictly higher); id breaks them anyway
_LIST_FOR_PRODUCT_SQL = text("""
    SELECT id, product_id, bidder_id, amount, created_at
    FROM bids
    WHERE product_id = :product_id
    ORDER BY amount DESC, created_at ASC, id ASC
""")

_LIST_BY_BIDDER_SQL = text("""
    SELECT id, product_id, bidder_id, amount, created_at
    FROM bids
    WHERE bidder_id = :bidder_id
    ORDER BY created_at DESC, id DESC
""")

_HIGHEST_SQL = text("""
    SELECT id, product_id, bidder_id, amount, created_at
    FROM bids
    WHERE product_id = :product_id
    ORDER BY amount DESC, created_at ASC, id ASC
    LIMIT 1
""")


def _row_to_bid(row: object) -> Bid:
    return Bid(
        id=row.id,  # type: ignore[attr-defined]
        product_id=row.product_id,  # type: ignore[attr-defined]
        bidder_id=row.bidder_id,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class BidRepository:
    async def insert(
        self, db: AsyncSession, product_id: str, bidder_id: str, amount: int
    ) -> Bid:
        result = await db.execute(
            _INSERT_BID_SQL,
            {"product_id": product_id, "bidder_id": bidder_id, "amount": amount},
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Bid insert returned no rows")
        return _row_to_bid(row)

    async def list_for_product(self, db: AsyncSession, product_id: str) -> list[Bid]:
        result = await db.execute(_LIST_FOR_PRODUCT_SQL, {"product_id": product_id})
        return [_row_to_bid(row) for row in result.fetchall()]

    async def list_by_bidder(self, db: AsyncSession, bidder_id: str) -> list[Bid]:
        result = await db.execute(_LIST_BY_BIDDER_SQL, {"bidder_id": bidder_id})
        return [_row_to_bid(row) for row in result.fetchall()]

    async def get_highest(self, db: AsyncSession, product_id: str) -> Bid | None:
        result = await db.execute(_HIGHEST_SQL, {"product_id": product_id})
        row = result.fetchone()
        return _row_to_bid(row) if row else None
