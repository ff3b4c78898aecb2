"""Unit tests for identity token verification."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from config.settings import settings
from src.am_common.errors import InvalidCredentialsError
from src.am_gateway.auth.jwt_handler import decode_identity_token
from tests.factories import make_token


def test_valid_token_returns_claims() -> None:
    claims = decode_identity_token(make_token("user-abc", email="x@y.z"))
    assert claims["sub"] == "user-abc"
    assert claims["email"] == "x@y.z"


def test_expired_token_rejected() -> None:
    token = jwt.encode(
        {"sub": "user-abc", "exp": datetime.now(UTC) - timedelta(seconds=5)},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    with pytest.raises(InvalidCredentialsError):
        decode_identity_token(token)


def test_wrong_secret_rejected() -> None:
    token = jwt.encode({"sub": "user-abc"}, "other-secret", algorithm="HS256")
    with pytest.raises(InvalidCredentialsError):
        decode_identity_token(token)


def test_missing_subject_rejected() -> None:
    token = jwt.encode({"email": "x@y.z"}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    with pytest.raises(InvalidCredentialsError):
        decode_identity_token(token)


def test_audience_enforced_when_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "JWT_AUDIENCE", "auction-api")
    with pytest.raises(InvalidCredentialsError):
        decode_identity_token(make_token("user-abc", aud="other-api"))
    assert decode_identity_token(make_token("user-abc", aud="auction-api"))["sub"] == "user-abc"


def test_garbage_rejected() -> None:
    with pytest.raises(InvalidCredentialsError):
        decode_identity_token("a.b.c")
