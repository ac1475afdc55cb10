"""JWT token creation and verification.

Access tokens carry the user id in `sub` and are the only authenticated
principal the API knows about: routers resolve it once via
get_current_user and pass the id explicitly into every service call.

NOTE: HS256 with one shared JWT_SECRET, no revocation list. Tokens stay
valid until expiry.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.sa_common.errors import InvalidCredentialsError, InvalidRefreshTokenError

_ALGORITHM = settings.JWT_ALGORITHM
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
_REFRESH_EXPIRE = timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS)


def _encode(user_id: str, token_type: str, lifetime: timedelta) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "type": token_type,
        "iat": now,
        "exp": now + lifetime,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def create_access_token(user_id: str) -> str:
    """Issue a short-lived access token (default: 30 min)."""
    return _encode(user_id, "access", _ACCESS_EXPIRE)


def create_refresh_token(user_id: str) -> str:
    """Issue a long-lived refresh token (default: 7 days). Not rotated on use."""
    return _encode(user_id, "refresh", _REFRESH_EXPIRE)


def decode_token(token: str, expected_type: str) -> dict[str, str]:
    """Decode and validate a JWT token.

    Args:
        token: Raw JWT string.
        expected_type: "access" or "refresh". A refresh token presented as an
                       access token (or vice versa) is rejected.

    Raises:
        InvalidCredentialsError: Token invalid/expired and expected_type="access".
        InvalidRefreshTokenError: Token invalid/expired and expected_type="refresh".
    """
    payload: dict[str, str] = {}
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],
        )
    except JWTError:
        _raise_auth_error(expected_type)

    if payload.get("type") != expected_type:
        _raise_auth_error(expected_type)

    return payload


def _raise_auth_error(expected_type: str) -> None:
    if expected_type == "access":
        raise InvalidCredentialsError()
    raise InvalidRefreshTokenError()
