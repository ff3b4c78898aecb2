"""Pydantic response schema for the verification relay."""

from pydantic import BaseModel

from src.am_common.enums import AIStatus


class VerificationResult(BaseModel):
    product_id: str
    status: AIStatus
    message: str
    is_approved: bool
    auction_added: bool = False
    error: str | None = None
