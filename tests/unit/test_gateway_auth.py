"""Unit tests for JWT handling, password hashing and UserService (mocked DB)."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from jose import jwt
from pydantic import ValidationError

from config.settings import settings
from src.sa_common.errors import (
    AccountDisabledError,
    EmailExistsError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    UsernameExistsError,
)
from src.sa_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.sa_gateway.auth.password import hash_password, verify_password
from src.sa_gateway.user.db_models import UserModel
from src.sa_gateway.user.schemas import RegisterRequest
from src.sa_gateway.user.service import ProfileService, UserService


def _make_user(is_active: bool = True) -> UserModel:
    user = UserModel()
    user.id = "u-alice"
    user.username = "alice"
    user.email = "alice@example.com"
    user.password_hash = "$2b$12$fakehash"
    user.display_name = "Alice"
    user.coins = settings.STARTING_COINS
    user.is_active = is_active
    return user


def _result(value: object | None) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


class TestJwt:
    def test_access_token_claims(self) -> None:
        payload = jwt.get_unverified_claims(create_access_token("u-1"))
        assert payload["sub"] == "u-1"
        assert payload["type"] == "access"

    def test_round_trip_refresh(self) -> None:
        payload = decode_token(create_refresh_token("u-1"), expected_type="refresh")
        assert payload["sub"] == "u-1"

    def test_access_token_rejected_as_refresh(self) -> None:
        with pytest.raises(InvalidRefreshTokenError):
            decode_token(create_access_token("u-1"), expected_type="refresh")

    def test_refresh_token_rejected_as_access(self) -> None:
        with pytest.raises(InvalidCredentialsError):
            decode_token(create_refresh_token("u-1"), expected_type="access")

    def test_expired_access_token(self) -> None:
        with patch("src.sa_gateway.auth.jwt_handler._ACCESS_EXPIRE", timedelta(seconds=-1)):
            token = create_access_token("u-1")
        with pytest.raises(InvalidCredentialsError):
            decode_token(token, expected_type="access")

    def test_garbage_token(self) -> None:
        with pytest.raises(InvalidCredentialsError):
            decode_token("not-a-jwt", expected_type="access")


class TestPassword:
    def test_hash_verifies(self) -> None:
        hashed = hash_password("MySecret1")
        assert hashed != "MySecret1"
        assert verify_password("MySecret1", hashed) is True
        assert verify_password("WrongPass9", hashed) is False

    def test_salted(self) -> None:
        assert hash_password("MySecret1") != hash_password("MySecret1")


class TestRegisterRequest:
    def test_weak_password_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(username="alice", email="a@example.com", password="alllowercase1")

    def test_bad_username_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(username="al ice", email="a@example.com", password="Pass1word")


class TestUserService:
    async def test_duplicate_username(self) -> None:
        db = AsyncMock()
        db.execute = AsyncMock(return_value=_result(_make_user()))

        with pytest.raises(UsernameExistsError):
            await UserService().register("alice", "new@example.com", "Pass1word", None, db)

    async def test_duplicate_email(self) -> None:
        db = AsyncMock()
        db.execute = AsyncMock(side_effect=[_result(None), _result(_make_user())])

        with pytest.raises(EmailExistsError):
            await UserService().register("newbie", "alice@example.com", "Pass1word", None, db)

    async def test_register_grants_starting_coins(self) -> None:
        db = AsyncMock()
        db.add = MagicMock()
        db.execute = AsyncMock(side_effect=[_result(None), _result(None)])

        user = await UserService().register("newbie", "n@example.com", "Pass1word", None, db)

        assert user.coins == settings.STARTING_COINS
        assert user.display_name == "newbie"
        assert user.password_hash != "Pass1word"
        db.add.assert_called_once_with(user)

    async def test_unknown_user_login(self) -> None:
        db = AsyncMock()
        db.execute = AsyncMock(return_value=_result(None))

        with pytest.raises(InvalidCredentialsError):
            await UserService().login("ghost", "Pass1word", db)

    async def test_wrong_password_login(self) -> None:
        db = AsyncMock()
        db.execute = AsyncMock(return_value=_result(_make_user()))

        with patch("src.sa_gateway.user.service.verify_password", return_value=False):
            with pytest.raises(InvalidCredentialsError):
                await UserService().login("alice", "WrongPass9", db)

    async def test_disabled_account(self) -> None:
        db = AsyncMock()
        db.execute = AsyncMock(return_value=_result(_make_user(is_active=False)))

        with patch("src.sa_gateway.user.service.verify_password", return_value=True):
            with pytest.raises(AccountDisabledError):
                await UserService().login("alice", "Pass1word", db)

    async def test_login_issues_token_pair(self) -> None:
        db = AsyncMock()
        db.execute = AsyncMock(return_value=_result(_make_user()))

        with patch("src.sa_gateway.user.service.verify_password", return_value=True):
            user, access, refresh = await UserService().login("alice", "Pass1word", db)

        assert decode_token(access, expected_type="access")["sub"] == "u-alice"
        assert decode_token(refresh, expected_type="refresh")["sub"] == "u-alice"

    async def test_refresh_returns_access_token(self) -> None:
        access = await UserService().refresh(create_refresh_token("u-alice"))
        assert decode_token(access, expected_type="access")["sub"] == "u-alice"


class TestProfileService:
    async def test_blank_search_skips_query(self) -> None:
        db = AsyncMock()

        assert await ProfileService().search_users(db, "   ") == []
        db.execute.assert_not_awaited()
