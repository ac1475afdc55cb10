"""User domain services: registration/login and public profiles.

All DB operations use the injected AsyncSession. Register runs inside the
caller's `async with db.begin()`; profile mutations commit themselves.
"""

from sqlalchemy import or_, select, text, update
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sa_common.errors import (
    AccountDisabledError,
    EmailExistsError,
    InvalidCredentialsError,
    UserNotFoundError,
    UsernameExistsError,
)
from src.sa_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.sa_gateway.auth.password import hash_password, verify_password
from src.sa_gateway.user.db_models import UserModel
from src.sa_gateway.user.schemas import UserInfo, UserProfile

_TOP_USERS_LIMIT = 10
_SEARCH_LIMIT = 20

_PROFILE_COUNTS_SQL = text("""
    SELECT
        (SELECT COUNT(*) FROM follows WHERE following_id = :user_id) AS followers_count,
        (SELECT COUNT(*) FROM follows WHERE follower_id  = :user_id) AS following_count,
        (SELECT COUNT(*) FROM posts   WHERE user_id      = :user_id) AS posts_count,
        EXISTS (
            SELECT 1 FROM follows
            WHERE follower_id = :viewer_id AND following_id = :user_id
        ) AS is_following
""")


class UserService:
    """Stateless service — instantiate once, reuse across requests."""

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        display_name: str | None,
        db: AsyncSession,
    ) -> UserModel:
        """Register a new user holding STARTING_COINS coins.

        The caller must wrap this in `async with db.begin()`.
        """
        # DB UNIQUE constraints are the final guard
        result = await db.execute(
            select(UserModel).where(UserModel.username == username)
        )
        if result.scalar_one_or_none() is not None:
            raise UsernameExistsError()

        result = await db.execute(
            select(UserModel).where(UserModel.email == email)
        )
        if result.scalar_one_or_none() is not None:
            raise EmailExistsError()

        user = UserModel(
            username=username,
            email=email,
            password_hash=hash_password(password),
            display_name=display_name or username,
            coins=settings.STARTING_COINS,
            rating=0,
            is_verified=False,
            status="online",
            is_active=True,
        )
        db.add(user)
        await db.flush()  # populate server defaults (id, created_at)
        await db.refresh(user)
        return user

    async def login(
        self,
        username: str,
        password: str,
        db: AsyncSession,
    ) -> tuple[UserModel, str, str]:
        """Authenticate user and return (user, access_token, refresh_token).

        Unknown user and wrong password raise the same InvalidCredentialsError.
        """
        result = await db.execute(
            select(UserModel).where(UserModel.username == username)
        )
        user = result.scalar_one_or_none()

        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        if not user.is_active:
            raise AccountDisabledError()

        return (
            user,
            create_access_token(str(user.id)),
            create_refresh_token(str(user.id)),
        )

    async def refresh(self, refresh_token: str) -> str:
        """Validate refresh token and return a new access token."""
        payload = decode_token(refresh_token, expected_type="refresh")
        return create_access_token(str(payload["sub"]))


class ProfileService:
    """Read and edit public profiles. Never touches the coins column."""

    async def get_profile(
        self, db: AsyncSession, user_id: str, viewer_id: str
    ) -> UserProfile:
        result = await db.execute(select(UserModel).where(UserModel.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise UserNotFoundError(user_id)

        counts = (
            await db.execute(
                _PROFILE_COUNTS_SQL, {"user_id": user_id, "viewer_id": viewer_id}
            )
        ).fetchone()
        return UserProfile(
            **UserInfo.from_model(user).model_dump(),
            followers_count=counts.followers_count if counts else 0,
            following_count=counts.following_count if counts else 0,
            posts_count=counts.posts_count if counts else 0,
            is_following=bool(counts.is_following) if counts else False,
        )

    async def update_profile(
        self,
        db: AsyncSession,
        user_id: str,
        display_name: str | None,
        bio: str | None,
        avatar: str | None,
    ) -> UserInfo:
        values = {
            k: v
            for k, v in {"display_name": display_name, "bio": bio, "avatar": avatar}.items()
            if v is not None
        }
        return await self._update(db, user_id, values)

    async def update_status(self, db: AsyncSession, user_id: str, status: str) -> UserInfo:
        return await self._update(db, user_id, {"status": status})

    async def top_users(self, db: AsyncSession) -> list[UserInfo]:
        result = await db.execute(
            select(UserModel)
            .where(UserModel.is_active.is_(True))
            .order_by(UserModel.rating.desc(), UserModel.created_at)
            .limit(_TOP_USERS_LIMIT)
        )
        return [UserInfo.from_model(u) for u in result.scalars().all()]

    async def search_users(self, db: AsyncSession, query: str) -> list[UserInfo]:
        query = query.strip()
        if not query:
            return []
        escaped = query.replace("\\", "\\\\").replace("%", r"\%").replace("_", r"\_")
        pattern = f"%{escaped}%"
        result = await db.execute(
            select(UserModel)
            .where(
                UserModel.is_active.is_(True),
                or_(
                    UserModel.username.ilike(pattern, escape="\\"),
                    UserModel.display_name.ilike(pattern, escape="\\"),
                ),
            )
            .order_by(UserModel.rating.desc(), UserModel.username)
            .limit(_SEARCH_LIMIT)
        )
        return [UserInfo.from_model(u) for u in result.scalars().all()]

    async def _update(
        self, db: AsyncSession, user_id: str, values: dict[str, str]
    ) -> UserInfo:
        try:
            if values:
                await db.execute(
                    update(UserModel)
                    .where(UserModel.id == user_id)
                    .values(**values)
                    .execution_options(synchronize_session="fetch")
                )
            result = await db.execute(
                select(UserModel)
                .where(UserModel.id == user_id)
                .execution_options(populate_existing=True)
            )
            user = result.scalar_one_or_none()
            if user is None:
                raise UserNotFoundError(user_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return UserInfo.from_model(user)
