"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Identity/User
  2xxx: Wallet
  3xxx: Listing
  4xxx: Bid
  5xxx: AI verification
  9xxx: System
"""

from src.am_common.cents import cents_to_display


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Identity/User ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid or expired token", 401)


class UserNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(1002, f"User not found: {user_id}", 404)


class SystemAccountRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "System account required", 403)


# --- 2xxx: Wallet ---

class InsufficientFundsError(AppError):
    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        super().__init__(
            2001,
            f"You need at least {cents_to_display(required)} in your wallet to place this bid",
            422,
        )


class InvalidAmountError(AppError):
    def __init__(self, amount: int) -> None:
        super().__init__(2002, f"Amount must be greater than 0, got {amount} cents", 422)


# --- 3xxx: Listing ---

class ListingNotFoundError(AppError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(3001, f"Product not found: {listing_id}", 404)


class InvalidInputError(AppError):
    def __init__(self, detail: str, http_status: int = 400) -> None:
        super().__init__(3002, detail, http_status)


class NotListingOwnerError(AppError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(3003, f"Only the seller can verify product {listing_id}", 403)


class VerificationClosedError(AppError):
    def __init__(self, listing_id: str, status: str) -> None:
        super().__init__(
            3004, f"Product {listing_id} verification already completed: {status}", 409
        )


# --- 4xxx: Bid ---

class AuctionEndedError(AppError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(4001, f"This auction has ended: {listing_id}", 422)


class NotVerifiedError(AppError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(
            4002, f"This product has not been verified by AI yet: {listing_id}", 422
        )


class SelfBidError(AppError):
    def __init__(self) -> None:
        super().__init__(4003, "You cannot bid on your own product", 422)


class BidTooLowError(AppError):
    def __init__(self, amount: int, current_price: int) -> None:
        super().__init__(
            4004,
            f"Bid amount must be higher than current price: "
            f"{cents_to_display(amount)} <= {cents_to_display(current_price)}",
            422,
        )


# --- 5xxx: AI verification ---

class UpstreamUnavailableError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(5001, detail, 502)


class UpstreamUnexpectedResponseError(AppError):
    def __init__(self, body: str) -> None:
        self.body = body
        super().__init__(5002, "Unexpected AI response format. Please try again.", 502)


class InvalidVideoError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(5003, detail, 400)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
