"""ListingRepository: concrete implementation of ListingRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
"""

import json
from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.am_common.enums import AIStatus
from src.am_common.errors import InternalError
from src.am_listing.domain.models import Listing, NewListing

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_COLUMNS = """
    id, seller_id, title, description, category, condition,
    starting_price, current_price, end_time,
    ai_status, ai_message, ai_verified, ai_verified_at, ai_status_updated_at,
    video_urls, created_at, updated_at
"""

_INSERT_SQL = text(f"""
    INSERT INTO products
        (seller_id, title, description, category, condition,
         starting_price, current_price, end_time, video_urls,
         ai_status, ai_verified, ai_status_updated_at)
    VALUES
        (:seller_id, :title, :description, :category, :condition,
         :starting_price, :starting_price, :end_time, CAST(:video_urls AS JSONB),
         'pending', FALSE, NOW())
    RETURNING {_COLUMNS}
""")

_GET_SQL = text(f"SELECT {_COLUMNS} FROM products WHERE id = :listing_id")

_GET_FOR_UPDATE_SQL = text(f"SELECT {_COLUMNS} FROM products WHERE id = :listing_id FOR UPDATE")

_LIST_ACTIVE_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM products
    WHERE ai_status = 'accepted'
      AND end_time > NOW()
      AND (CAST(:category AS TEXT) IS NULL OR category = CAST(:category AS TEXT))
      AND (
          CAST(:search AS TEXT) IS NULL
          OR title ILIKE '%' || CAST(:search AS TEXT) || '%'
          OR description ILIKE '%' || CAST(:search AS TEXT) || '%'
      )
      AND (CAST(:min_price AS BIGINT) IS NULL OR current_price >= CAST(:min_price AS BIGINT))
      AND (CAST(:max_price AS BIGINT) IS NULL OR current_price <= CAST(:max_price AS BIGINT))
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")

_LIST_BY_SELLER_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM products
    WHERE seller_id = :seller_id
    ORDER BY created_at DESC, id DESC
""")

_SET_AI_STATUS_SQL = text(f"""
    UPDATE products
    SET ai_status = :status,
        ai_message = :message,
        ai_verified = CAST(:verified AS BOOLEAN),
        ai_verified_at = CASE WHEN CAST(:verified AS BOOLEAN) THEN NOW() ELSE NULL END,
        ai_status_updated_at = NOW(),
        updated_at = NOW()
    WHERE id = :listing_id
    RETURNING {_COLUMNS}
""")

# Compare-and-swap: a lower or equal amount never overwrites the price
_RAISE_PRICE_SQL = text("""
    UPDATE products
    SET current_price = :amount,
        updated_at = NOW()
    WHERE id = :listing_id AND current_price < :amount
    RETURNING current_price
""")

_EXPIRE_STALE_SQL = text(f"""
    UPDATE products
    SET ai_status = 'error',
        ai_message = :message,
        ai_verified = FALSE,
        ai_verified_at = NULL,
        ai_status_updated_at = NOW(),
        updated_at = NOW()
    WHERE ai_status IN ('pending', 'processing')
      AND ai_status_updated_at < :updated_before
    RETURNING {_COLUMNS}
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _video_urls(raw: object) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return list(json.loads(raw))
    return list(raw)  # type: ignore[call-overload]


def _row_to_listing(row: object) -> Listing:
    return Listing(
        id=row.id,  # type: ignore[attr-defined]
        seller_id=row.seller_id,  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        category=row.category,  # type: ignore[attr-defined]
        condition=row.condition,  # type: ignore[attr-defined]
        starting_price=row.starting_price,  # type: ignore[attr-defined]
        current_price=row.current_price,  # type: ignore[attr-defined]
        end_time=row.end_time,  # type: ignore[attr-defined]
        ai_status=row.ai_status,  # type: ignore[attr-defined]
        ai_message=row.ai_message,  # type: ignore[attr-defined]
        ai_verified=row.ai_verified,  # type: ignore[attr-defined]
        ai_verified_at=row.ai_verified_at,  # type: ignore[attr-defined]
        ai_status_updated_at=row.ai_status_updated_at,  # type: ignore[attr-defined]
        video_urls=_video_urls(row.video_urls),  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class ListingRepository:
    async def create(self, db: AsyncSession, new: NewListing) -> Listing:
        result = await db.execute(
            _INSERT_SQL,
            {
                "seller_id": new.seller_id,
                "title": new.title,
                "description": new.description,
                "category": new.category,
                "condition": new.condition,
                "starting_price": new.starting_price,
                "end_time": new.end_time,
                "video_urls": json.dumps(new.video_urls),
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Product insert returned no rows")
        return _row_to_listing(row)

    async def get_by_id(self, db: AsyncSession, listing_id: str) -> Listing | None:
        result = await db.execute(_GET_SQL, {"listing_id": listing_id})
        row = result.fetchone()
        return _row_to_listing(row) if row else None

    async def get_for_update(self, db: AsyncSession, listing_id: str) -> Listing | None:
        """Row-locks the listing until the caller's transaction ends."""
        result = await db.execute(_GET_FOR_UPDATE_SQL, {"listing_id": listing_id})
        row = result.fetchone()
        return _row_to_listing(row) if row else None

    async def list_active(
        self,
        db: AsyncSession,
        category: str | None,
        search: str | None,
        min_price: int | None,
        max_price: int | None,
        limit: int,
    ) -> list[Listing]:
        result = await db.execute(
            _LIST_ACTIVE_SQL,
            {
                "category": category,
                "search": search,
                "min_price": min_price,
                "max_price": max_price,
                "limit": limit,
            },
        )
        return [_row_to_listing(row) for row in result.fetchall()]

    async def list_by_seller(self, db: AsyncSession, seller_id: str) -> list[Listing]:
        result = await db.execute(_LIST_BY_SELLER_SQL, {"seller_id": seller_id})
        return [_row_to_listing(row) for row in result.fetchall()]

    async def set_ai_status(
        self,
        db: AsyncSession,
        listing_id: str,
        status: AIStatus,
        message: str | None,
    ) -> Listing | None:
        result = await db.execute(
            _SET_AI_STATUS_SQL,
            {
                "listing_id": listing_id,
                "status": status.value,
                "message": message,
                "verified": status == AIStatus.ACCEPTED,
            },
        )
        row = result.fetchone()
        return _row_to_listing(row) if row else None

    async def raise_current_price(
        self, db: AsyncSession, listing_id: str, amount: int
    ) -> int | None:
        result = await db.execute(_RAISE_PRICE_SQL, {"listing_id": listing_id, "amount": amount})
        row = result.fetchone()
        return row.current_price if row else None

    async def expire_stale_verifications(
        self, db: AsyncSession, updated_before: datetime, message: str
    ) -> list[Listing]:
        """Only rows still pending/processing are touched, so a verdict written
        concurrently by the relay is never overwritten."""
        result = await db.execute(
            _EXPIRE_STALE_SQL, {"updated_before": updated_before, "message": message}
        )
        return [_row_to_listing(row) for row in result.fetchall()]
