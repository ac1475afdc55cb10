"""Unit tests for SocialApplicationService, NotificationApplicationService and Notifier."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from src.sa_common.enums import NotificationType
from src.sa_common.errors import (
    NotificationNotFoundError,
    SelfFollowError,
    UserNotFoundError,
)
from src.sa_social.application.notifier import Notifier
from src.sa_social.application.service import (
    NotificationApplicationService,
    SocialApplicationService,
)
from src.sa_social.domain.models import Follow, Notification


def _follow() -> Follow:
    return Follow(id="f-1", follower_id="alice", following_id="bob", created_at=datetime.now(UTC))


class TestFollow:
    async def test_creates_edge_and_notifies(self) -> None:
        repo = AsyncMock()
        repo.user_exists.return_value = True
        repo.create_follow.return_value = _follow()
        notifier = AsyncMock()
        db = AsyncMock()
        svc = SocialApplicationService(repo=repo, notifier=notifier)

        result = await svc.follow(db, "alice", "bob")

        assert result.following is True
        assert result.created is True
        db.commit.assert_awaited_once()
        notifier.notify.assert_awaited_once()
        assert notifier.notify.await_args.kwargs["notification_type"] == NotificationType.FOLLOW
        assert notifier.notify.await_args.kwargs["recipient_id"] == "bob"

    async def test_duplicate_follow_is_noop_without_notification(self) -> None:
        repo = AsyncMock()
        repo.user_exists.return_value = True
        repo.create_follow.return_value = None
        notifier = AsyncMock()
        svc = SocialApplicationService(repo=repo, notifier=notifier)

        result = await svc.follow(AsyncMock(), "alice", "bob")

        assert result.following is True
        assert result.created is False
        notifier.notify.assert_not_awaited()

    async def test_self_follow_rejected(self) -> None:
        repo = AsyncMock()
        svc = SocialApplicationService(repo=repo, notifier=AsyncMock())

        with pytest.raises(SelfFollowError):
            await svc.follow(AsyncMock(), "alice", "alice")

        repo.create_follow.assert_not_awaited()

    async def test_unknown_target(self) -> None:
        repo = AsyncMock()
        repo.user_exists.return_value = False
        db = AsyncMock()
        svc = SocialApplicationService(repo=repo, notifier=AsyncMock())

        with pytest.raises(UserNotFoundError):
            await svc.follow(db, "alice", "ghost")

        db.rollback.assert_awaited_once()

    async def test_unfollow_reports_whether_edge_existed(self) -> None:
        repo = AsyncMock()
        repo.delete_follow.return_value = False
        notifier = AsyncMock()
        svc = SocialApplicationService(repo=repo, notifier=notifier)

        result = await svc.unfollow(AsyncMock(), "alice", "bob")

        assert result.following is False
        assert result.created is False
        notifier.notify.assert_not_awaited()


class TestNotifier:
    async def test_self_notification_skipped(self) -> None:
        repo = AsyncMock()
        notifier = Notifier(repo=repo)

        result = await notifier.notify(
            AsyncMock(),
            recipient_id="alice",
            actor_id="alice",
            notification_type=NotificationType.LIKE,
        )

        assert result is None
        repo.create.assert_not_awaited()

    async def test_self_notification_allowed_when_requested(self) -> None:
        repo = AsyncMock()
        repo.create.return_value = Notification(
            id="n-1", user_id="alice", actor_id="alice", type="tournament"
        )
        db = AsyncMock()
        notifier = Notifier(repo=repo)

        result = await notifier.notify(
            db,
            recipient_id="alice",
            actor_id="alice",
            notification_type=NotificationType.TOURNAMENT,
            allow_self=True,
        )

        assert result is not None
        db.commit.assert_awaited_once()

    async def test_database_failure_is_swallowed(self) -> None:
        repo = AsyncMock()
        repo.create.side_effect = OperationalError("INSERT", {}, Exception("db down"))
        db = AsyncMock()
        notifier = Notifier(repo=repo)

        result = await notifier.notify(
            db,
            recipient_id="bob",
            actor_id="alice",
            notification_type=NotificationType.GIFT,
        )

        assert result is None
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()


class TestNotifications:
    async def test_list_includes_unread_count(self) -> None:
        repo = AsyncMock()
        repo.list_for_user.return_value = [
            Notification(
                id="n-1",
                user_id="bob",
                actor_id="alice",
                type="like",
                body="liked your post",
                created_at=datetime.now(UTC),
                actor_username="alice",
                actor_display_name="Alice",
            )
        ]
        repo.count_unread.return_value = 1
        svc = NotificationApplicationService(repo=repo)

        result = await svc.list_notifications(MagicMock(), "bob")

        assert result.unread_count == 1
        assert result.items[0].actor.display_name == "Alice"

    async def test_mark_unknown_notification(self) -> None:
        repo = AsyncMock()
        repo.mark_read.return_value = False
        db = AsyncMock()
        svc = NotificationApplicationService(repo=repo)

        with pytest.raises(NotificationNotFoundError):
            await svc.mark_read(db, "bob", "n-404")

        db.rollback.assert_awaited_once()
