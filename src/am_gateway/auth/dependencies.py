"""FastAPI dependency: get_current_user.

Usage in any protected router:
    from src.am_gateway.auth.dependencies import get_current_user

    @router.get("/protected")
    async def protected(user: UserModel = Depends(get_current_user)):
        ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.am_common.database import get_db_session
from src.am_common.errors import InvalidCredentialsError, SystemAccountRequiredError
from src.am_gateway.auth.jwt_handler import decode_identity_token
from src.am_gateway.user.db_models import UserModel
from src.am_gateway.user.service import UserService

_bearer_scheme = HTTPBearer(auto_error=False)
_user_service = UserService()

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    """Validate the provider's Bearer token and return the local UserModel.

    Raises HTTP 401 if the token is missing, invalid, or expired.
    """
    if credentials is None:
        raise _CREDENTIALS_EXCEPTION
    try:
        claims = decode_identity_token(credentials.credentials)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    return await _user_service.get_or_provision(
        db,
        subject=str(claims["sub"]),
        email=claims.get("email"),
        name=claims.get("name"),
    )


async def require_system_user(
    current_user: UserModel = Depends(get_current_user),
) -> UserModel:
    """Verify the caller is a configured service account (AI relay, scheduler).

    Raises HTTP 403 (AppError code 1003) for ordinary users.
    Protects verdict writes and the stale-verification sweep.
    """
    if current_user.id not in settings.SYSTEM_SUBJECTS:
        raise SystemAccountRequiredError()
    return current_user
