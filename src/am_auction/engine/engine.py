"""AuctionEngine: the only writer of bids and of a listing's current price.

place_bid serializes twice:
  * in-process, on an asyncio.Lock per listing;
  * in the database, on the listing row (SELECT ... FOR UPDATE) and on the
    bidder's users row (conditional UPDATE in reserve_for_bid).
The reservation debit, its transaction row, the bid row and the price update
share one unit of work, so they commit together or not at all.
"""

import asyncio
import logging
from collections import Counter
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.am_auction.domain.models import BidReceipt
from src.am_auction.domain.repository import BidRepositoryProtocol
from src.am_auction.infrastructure.persistence import BidRepository
from src.am_auction.rules.auction_window import check_auction_open
from src.am_auction.rules.bid_increment import check_bid_increment
from src.am_auction.rules.self_bid import check_not_self_bid
from src.am_auction.rules.verification_gate import check_verified
from src.am_common.cents import calculate_reservation, cents_to_display
from src.am_common.database import unit_of_work
from src.am_common.datetime_utils import utc_now
from src.am_common.errors import BidTooLowError, InvalidAmountError, ListingNotFoundError
from src.am_listing.domain.repository import ListingRepositoryProtocol
from src.am_listing.infrastructure.persistence import ListingRepository
from src.am_wallet.domain.repository import WalletRepositoryProtocol
from src.am_wallet.infrastructure.persistence import WalletRepository

logger = logging.getLogger(__name__)


class AuctionEngine:
    def __init__(
        self,
        listings: ListingRepositoryProtocol | None = None,
        bids: BidRepositoryProtocol | None = None,
        wallets: WalletRepositoryProtocol | None = None,
        clock: Callable[[], datetime] = utc_now,
        reservation_bps: int | None = None,
    ) -> None:
        self._listings: ListingRepositoryProtocol = listings or ListingRepository()
        self._bids: BidRepositoryProtocol = bids or BidRepository()
        self._wallets: WalletRepositoryProtocol = wallets or WalletRepository()
        self._clock = clock
        self._reservation_bps = (
            reservation_bps if reservation_bps is not None else settings.BID_RESERVATION_BPS
        )
        # Entries live only while some place_bid holds or waits on them
        self._listing_locks: dict[str, asyncio.Lock] = {}
        self._lock_holders: Counter[str] = Counter()

    @asynccontextmanager
    async def _listing_lock(self, listing_id: str) -> AsyncIterator[None]:
        lock = self._listing_locks.setdefault(listing_id, asyncio.Lock())
        self._lock_holders[listing_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._lock_holders[listing_id] -= 1
            if self._lock_holders[listing_id] == 0:
                del self._lock_holders[listing_id]
                del self._listing_locks[listing_id]

    def required_funds(self, amount: int) -> int:
        return calculate_reservation(amount, self._reservation_bps)

    async def place_bid(
        self, db: AsyncSession, listing_id: str, bidder_id: str, amount: int
    ) -> BidReceipt:
        """Main entry point. Raises an AppError subclass on every rejection."""
        if amount <= 0:
            raise InvalidAmountError(amount)
        async with self._listing_lock(listing_id):
            async with unit_of_work(db):
                receipt = await self._place_bid_inner(db, listing_id, bidder_id, amount)
        logger.info(
            "Bid accepted listing=%s bidder=%s amount=%s reserved=%s",
            listing_id,
            bidder_id,
            cents_to_display(amount),
            cents_to_display(receipt.reserved),
        )
        return receipt

    async def _place_bid_inner(
        self, db: AsyncSession, listing_id: str, bidder_id: str, amount: int
    ) -> BidReceipt:
        listing = await self._listings.get_for_update(db, listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)

        check_auction_open(listing, self._clock())
        check_verified(listing)
        check_not_self_bid(listing, bidder_id)
        check_bid_increment(listing, amount)

        required = self.required_funds(amount)
        wallet, tx = await self._wallets.reserve_for_bid(db, bidder_id, required, listing_id)

        bid = await self._bids.insert(db, listing_id, bidder_id, amount)

        new_price = await self._listings.raise_current_price(db, listing_id, amount)
        if new_price is None:
            # Lost a compare-and-swap the row lock should have prevented; undo everything
            raise BidTooLowError(amount, listing.current_price)

        return BidReceipt(
            bid=bid,
            previous_price=listing.current_price,
            reserved=required,
            balance_after=wallet.balance,
            transaction_id=tx.id,
        )


_engine: AuctionEngine | None = None


def get_auction_engine() -> AuctionEngine:
    global _engine  # noqa: PLW0603
    if _engine is None:
        _engine = AuctionEngine()
    return _engine
