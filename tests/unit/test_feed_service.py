"""Unit tests for FeedApplicationService (repo and notifier mocked)."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from src.sa_common.enums import NotificationType
from src.sa_common.errors import PostNotFoundError
from src.sa_common.pagination import ts_cursor_decode
from src.sa_feed.application.service import FeedApplicationService, comment_preview
from src.sa_feed.domain.models import Author, Comment, Post
from src.sa_social.application.notifier import Notifier


def _post(post_id: str = "p-1", author: str = "bob", likes: int = 0, **kw) -> Post:
    return Post(
        id=post_id,
        user_id=author,
        content="hello",
        likes=likes,
        created_at=kw.pop("created_at", datetime.now(UTC)),
        author=Author(user_id=author, username=author, display_name=author.title()),
        **kw,
    )


@pytest.fixture
def repo() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def notifier() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def svc(repo: AsyncMock, notifier: AsyncMock) -> FeedApplicationService:
    return FeedApplicationService(repo=repo, notifier=notifier)


class TestCommentPreview:
    def test_short_content_unchanged(self) -> None:
        assert comment_preview("nice!", limit=10) == "nice!"

    def test_exact_limit_unchanged(self) -> None:
        assert comment_preview("a" * 10, limit=10) == "a" * 10

    def test_long_content_truncated_with_ellipsis(self) -> None:
        assert comment_preview("a" * 150, limit=100) == "a" * 100 + "..."


class TestToggleLike:
    async def test_first_toggle_likes_and_notifies_author(
        self, svc: FeedApplicationService, repo: AsyncMock, notifier: AsyncMock, db: AsyncMock
    ) -> None:
        repo.get_post_for_update.return_value = _post(likes=4)
        repo.delete_like.return_value = False
        repo.insert_like.return_value = True
        repo.adjust_likes.return_value = 5

        result = await svc.toggle_like(db, "alice", "p-1")

        assert result.liked is True
        assert result.likes == 5
        repo.adjust_likes.assert_awaited_once_with(db, "p-1", 1)
        db.commit.assert_awaited_once()
        kwargs = notifier.notify.await_args.kwargs
        assert kwargs["recipient_id"] == "bob"
        assert kwargs["actor_id"] == "alice"
        assert kwargs["notification_type"] == NotificationType.LIKE

    async def test_second_toggle_unlikes_without_notification(
        self, svc: FeedApplicationService, repo: AsyncMock, notifier: AsyncMock, db: AsyncMock
    ) -> None:
        repo.get_post_for_update.return_value = _post(likes=5)
        repo.delete_like.return_value = True
        repo.adjust_likes.return_value = 4

        result = await svc.toggle_like(db, "alice", "p-1")

        assert result.liked is False
        assert result.likes == 4
        repo.insert_like.assert_not_awaited()
        repo.adjust_likes.assert_awaited_once_with(db, "p-1", -1)
        notifier.notify.assert_not_awaited()

    async def test_toggle_twice_restores_counter(
        self, svc: FeedApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.get_post_for_update.return_value = _post(likes=0)
        repo.delete_like.side_effect = [False, True]
        repo.insert_like.return_value = True
        repo.adjust_likes.side_effect = [1, 0]

        first = await svc.toggle_like(db, "alice", "p-1")
        second = await svc.toggle_like(db, "alice", "p-1")

        assert (first.liked, first.likes) == (True, 1)
        assert (second.liked, second.likes) == (False, 0)

    async def test_unknown_post(
        self, svc: FeedApplicationService, repo: AsyncMock, notifier: AsyncMock, db: AsyncMock
    ) -> None:
        repo.get_post_for_update.return_value = None

        with pytest.raises(PostNotFoundError):
            await svc.toggle_like(db, "alice", "p-404")

        db.rollback.assert_awaited_once()
        repo.insert_like.assert_not_awaited()
        notifier.notify.assert_not_awaited()


class TestComments:
    async def test_add_comment_bumps_counter_and_notifies_with_preview(
        self, svc: FeedApplicationService, repo: AsyncMock, notifier: AsyncMock, db: AsyncMock
    ) -> None:
        content = "x" * 140
        repo.get_post_for_update.return_value = _post()
        repo.create_comment.return_value = Comment(
            id="c-1", post_id="p-1", user_id="alice", content=content
        )
        repo.increment_comments.return_value = 3

        result = await svc.add_comment(db, "alice", "p-1", content)

        assert result.comments == 3
        assert result.comment.id == "c-1"
        kwargs = notifier.notify.await_args.kwargs
        assert kwargs["notification_type"] == NotificationType.COMMENT
        assert kwargs["recipient_id"] == "bob"
        assert kwargs["body"].endswith("...")
        assert len(kwargs["body"]) == 103

    async def test_comment_on_missing_post(
        self, svc: FeedApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.get_post_for_update.return_value = None

        with pytest.raises(PostNotFoundError):
            await svc.add_comment(db, "alice", "p-404", "hi")

        repo.create_comment.assert_not_awaited()
        db.rollback.assert_awaited_once()

    async def test_list_comments_for_missing_post(
        self, svc: FeedApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.get_post.return_value = None

        with pytest.raises(PostNotFoundError):
            await svc.list_comments(db, "p-404")


class TestSelfInteraction:
    """Liking or commenting on your own post creates no notification."""

    @pytest.fixture
    def notification_repo(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture
    def own_svc(self, repo: AsyncMock, notification_repo: AsyncMock) -> FeedApplicationService:
        return FeedApplicationService(repo=repo, notifier=Notifier(repo=notification_repo))

    async def test_like_own_post(
        self,
        own_svc: FeedApplicationService,
        repo: AsyncMock,
        notification_repo: AsyncMock,
        db: AsyncMock,
    ) -> None:
        repo.get_post_for_update.return_value = _post(author="bob", likes=0)
        repo.delete_like.return_value = False
        repo.insert_like.return_value = True
        repo.adjust_likes.return_value = 1

        result = await own_svc.toggle_like(db, "bob", "p-1")

        assert (result.liked, result.likes) == (True, 1)
        notification_repo.create.assert_not_awaited()
        # only the like transaction commits
        db.commit.assert_awaited_once()

    async def test_comment_on_own_post(
        self,
        own_svc: FeedApplicationService,
        repo: AsyncMock,
        notification_repo: AsyncMock,
        db: AsyncMock,
    ) -> None:
        repo.get_post_for_update.return_value = _post(author="bob")
        repo.create_comment.return_value = Comment(
            id="c-1", post_id="p-1", user_id="bob", content="thanks all"
        )
        repo.increment_comments.return_value = 1

        result = await own_svc.add_comment(db, "bob", "p-1", "thanks all")

        assert result.comments == 1
        notification_repo.create.assert_not_awaited()
        db.commit.assert_awaited_once()


class TestPosts:
    async def test_list_posts_pages_with_ts_cursor(
        self, svc: FeedApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        now = datetime.now(UTC)
        rows = [_post(f"p-{i}", created_at=now - timedelta(minutes=i)) for i in range(3)]
        repo.list_posts.return_value = rows

        result = await svc.list_posts(db, "alice", limit=2)

        assert [p.id for p in result.items] == ["p-0", "p-1"]
        assert result.has_more is True
        ts, last_id = ts_cursor_decode(result.next_cursor)
        assert last_id == "p-1"
        assert ts == rows[1].created_at
        # one extra row is requested to detect the next page
        assert repo.list_posts.await_args.args[-1] == 3

    async def test_limit_is_capped(
        self, svc: FeedApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.list_posts.return_value = []

        result = await svc.list_posts(db, "alice", limit=500)

        assert result.has_more is False
        assert result.next_cursor is None
        assert repo.list_posts.await_args.args[-1] == 51

    async def test_create_post_commits(
        self, svc: FeedApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.create_post.return_value = _post(author="alice", coin_cost=25)

        result = await svc.create_post(db, "alice", "hello", coin_cost=25)

        assert result.coin_cost == 25
        assert result.author is not None
        db.commit.assert_awaited_once()

    async def test_get_missing_post(
        self, svc: FeedApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.get_post.return_value = None

        with pytest.raises(PostNotFoundError):
            await svc.get_post(db, "p-404", "alice")


class TestUnlock:
    async def test_unlock_reports_cost_without_moving_coins(
        self, svc: FeedApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.get_post.return_value = _post(coin_cost=50)

        result = await svc.unlock(db, "alice", "p-1")

        assert result.success is True
        assert result.coin_cost == 50
        db.commit.assert_not_awaited()

    async def test_unlock_missing_post(
        self, svc: FeedApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.get_post.return_value = None

        with pytest.raises(PostNotFoundError):
            await svc.unlock(db, "alice", "p-404")
