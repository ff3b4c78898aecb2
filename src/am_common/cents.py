"""Integer arithmetic utilities for cents-based auction money.

All prices, bids, and balances use int (cents). No float, no Decimal.
"""


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"


def calculate_reservation(bid_amount: int, reservation_bps: int) -> int:
    """Funds debited from the bidder when a bid is accepted.

    reservation = ceil(bid_amount * reservation_bps / 10000)
    With the default 5000 bps an even-cent bid reserves exactly half; an
    odd-cent bid rounds the half cent up (platform never under-collects).
    """
    if bid_amount == 0 or reservation_bps == 0:
        return 0
    return (bid_amount * reservation_bps + 9999) // 10000
