"""FastAPI dependency: get_current_user.

Usage in any protected router:
    from src.sa_gateway.auth.dependencies import get_current_user

    @router.post("/gifts")
    async def send_gift(user: UserModel = Depends(get_current_user)):
        ...

A missing or bad token raises AuthenticationRequiredError, which the
AppError handler renders as 401 with the standard error envelope.
"""

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.database import get_db_session
from src.sa_common.errors import (
    AccountDisabledError,
    AuthenticationRequiredError,
    InvalidCredentialsError,
)
from src.sa_gateway.auth.jwt_handler import decode_token
from src.sa_gateway.user.db_models import UserModel

# auto_error=False: a missing header reaches us as None so the 401 body
# uses the ApiResponse envelope instead of FastAPI's {"detail": ...}.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


async def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    """Validate the Bearer token and return the UserModel.

    Raises AuthenticationRequiredError (401) if the token is missing, invalid,
    expired, or names an unknown user; AccountDisabledError (403) if the
    account is disabled.
    """
    if not token:
        raise AuthenticationRequiredError()
    try:
        payload = decode_token(token, expected_type="access")
    except InvalidCredentialsError:
        raise AuthenticationRequiredError() from None

    user_id: str | None = payload.get("sub")
    if not user_id:
        raise AuthenticationRequiredError()

    result = await db.execute(select(UserModel).where(UserModel.id == str(user_id)))
    user = result.scalar_one_or_none()
    if user is None:
        raise AuthenticationRequiredError()

    if not user.is_active:
        raise AccountDisabledError()

    return user
