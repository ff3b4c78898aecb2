"""Verification of bearer tokens issued by the external identity provider.

This service never issues tokens. It only checks the signature, expiry and
(optionally) audience of tokens minted by the provider, which shares
JWT_SECRET with us (HS256). For an RS256 provider, set JWT_ALGORITHM=RS256
and JWT_SECRET to the provider's public key.
"""

from typing import Any

from jose import JWTError, jwt

from config.settings import settings
from src.am_common.errors import InvalidCredentialsError


def decode_identity_token(token: str) -> dict[str, Any]:
    """Decode and validate a provider-issued JWT.

    Returns:
        Decoded claims; guaranteed to contain a non-empty "sub".

    Raises:
        InvalidCredentialsError: signature/expiry/audience invalid or "sub" missing.
    """
    try:
        claims: dict[str, Any] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],  # Explicit list prevents algorithm confusion
            audience=settings.JWT_AUDIENCE,
            options={"verify_aud": settings.JWT_AUDIENCE is not None},
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if not claims.get("sub"):
        raise InvalidCredentialsError()
    return claims
