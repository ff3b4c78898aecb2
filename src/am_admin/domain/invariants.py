"""Marketplace-wide consistency checks.

INV-L: every user's balance equals the sum of their signed transactions
       (users are provisioned at zero).
INV-P: current_price >= starting_price on every listing.
INV-B: a listing with bids has current_price equal to its highest bid.
INV-S: no bid was placed by the listing's own seller.
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

_LEDGER_MISMATCH_SQL = text("""
    SELECT u.id, u.balance, COALESCE(SUM(t.amount), 0) AS ledger_total
    FROM users u
    LEFT JOIN transactions t ON t.user_id = u.id
    GROUP BY u.id, u.balance
    HAVING u.balance <> COALESCE(SUM(t.amount), 0)
""")
_PRICE_FLOOR_SQL = text("""
    SELECT id, starting_price, current_price
    FROM products
    WHERE current_price < starting_price
""")
_PRICE_LEADER_SQL = text("""
    SELECT p.id, p.current_price, MAX(b.amount) AS top_bid
    FROM products p
    JOIN bids b ON b.product_id = p.id
    GROUP BY p.id, p.current_price
    HAVING p.current_price <> MAX(b.amount)
""")
_SELF_BID_SQL = text("""
    SELECT b.id, b.product_id, b.bidder_id
    FROM bids b
    JOIN products p ON p.id = b.product_id
    WHERE b.bidder_id = p.seller_id
""")


async def verify_marketplace_invariants(db: AsyncSession) -> list[str]:
    """Run every check. Returns violation strings, empty when consistent."""
    violations: list[str] = []

    for row in (await db.execute(_LEDGER_MISMATCH_SQL)).fetchall():
        violations.append(
            f"INV-L violated: user {row.id} balance={row.balance} "
            f"!= ledger_total={row.ledger_total}"
        )
    for row in (await db.execute(_PRICE_FLOOR_SQL)).fetchall():
        violations.append(
            f"INV-P violated: product {row.id} current_price={row.current_price} "
            f"< starting_price={row.starting_price}"
        )
    for row in (await db.execute(_PRICE_LEADER_SQL)).fetchall():
        violations.append(
            f"INV-B violated: product {row.id} current_price={row.current_price} "
            f"!= top_bid={row.top_bid}"
        )
    for row in (await db.execute(_SELF_BID_SQL)).fetchall():
        violations.append(
            f"INV-S violated: bid {row.id} on product {row.product_id} "
            f"placed by seller {row.bidder_id}"
        )

    for msg in violations:
        logger.error(msg)
    return violations
