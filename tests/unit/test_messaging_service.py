"""Unit tests for MessagingApplicationService."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from src.sa_common.errors import ConversationNotFoundError, InvalidParticipantsError
from src.sa_messaging.application.service import MessagingApplicationService, member_set
from src.sa_messaging.domain.models import Conversation, Member, Message


def _members(*ids: str) -> list[Member]:
    return [Member(user_id=i, username=i, display_name=i.title()) for i in ids]


@pytest.fixture
def repo() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def svc(repo: AsyncMock) -> MessagingApplicationService:
    return MessagingApplicationService(repo=repo)


class TestMemberSet:
    def test_caller_added_and_deduplicated(self) -> None:
        assert member_set("bob", ["alice", "alice", "bob"]) == ["alice", "bob"]

    def test_order_independent(self) -> None:
        assert member_set("a", ["c", "b"]) == member_set("c", ["a", "b"])


class TestGetOrCreate:
    async def test_creates_when_no_conversation_exists(
        self, svc: MessagingApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.count_existing_users.return_value = 2
        repo.find_conversation_by_members.return_value = None
        repo.create_conversation.return_value = Conversation(id="c-1")
        repo.list_members.return_value = {"c-1": _members("alice", "bob")}

        result = await svc.get_or_create_conversation(db, "alice", ["bob"])

        assert result.created is True
        assert result.conversation.id == "c-1"
        assert len(result.conversation.members) == 2
        repo.create_conversation.assert_awaited_once_with(db, ["alice", "bob"])
        db.commit.assert_awaited_once()

    async def test_returns_existing_conversation_for_same_members(
        self, svc: MessagingApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.count_existing_users.return_value = 2
        repo.find_conversation_by_members.return_value = "c-1"
        repo.get_conversation.return_value = Conversation(id="c-1")
        repo.list_members.return_value = {"c-1": _members("alice", "bob")}

        result = await svc.get_or_create_conversation(db, "bob", ["alice"])

        assert result.created is False
        assert result.conversation.id == "c-1"
        repo.create_conversation.assert_not_awaited()

    async def test_only_self_is_rejected(
        self, svc: MessagingApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        with pytest.raises(InvalidParticipantsError):
            await svc.get_or_create_conversation(db, "alice", ["alice"])

        repo.count_existing_users.assert_not_awaited()

    async def test_unknown_participant_is_rejected(
        self, svc: MessagingApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.count_existing_users.return_value = 1

        with pytest.raises(InvalidParticipantsError):
            await svc.get_or_create_conversation(db, "alice", ["ghost"])

        db.rollback.assert_awaited_once()
        repo.create_conversation.assert_not_awaited()


class TestMembership:
    async def test_non_member_cannot_read(
        self, svc: MessagingApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.is_member.return_value = False

        with pytest.raises(ConversationNotFoundError):
            await svc.list_messages(db, "mallory", "c-1")

        repo.list_messages.assert_not_awaited()

    async def test_non_member_cannot_send(
        self, svc: MessagingApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.is_member.return_value = False

        with pytest.raises(ConversationNotFoundError):
            await svc.send_message(db, "mallory", "c-1", "hi")

        repo.insert_message.assert_not_awaited()
        db.rollback.assert_awaited_once()

    async def test_send_touches_conversation(
        self, svc: MessagingApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.is_member.return_value = True
        repo.insert_message.return_value = Message(
            id="m-1",
            conversation_id="c-1",
            sender_id="alice",
            content="hi",
            created_at=datetime.now(UTC),
        )

        result = await svc.send_message(db, "alice", "c-1", "hi")

        assert result.id == "m-1"
        assert result.is_read is False
        repo.touch_conversation.assert_awaited_once_with(db, "c-1")
        db.commit.assert_awaited_once()

    async def test_mark_read_reports_updated_rows(
        self, svc: MessagingApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.is_member.return_value = True
        repo.mark_read.return_value = 3

        result = await svc.mark_read(db, "bob", "c-1")

        assert result.updated == 3
        repo.mark_read.assert_awaited_once_with(db, "c-1", "bob")


class TestListConversations:
    async def test_members_attached(
        self, svc: MessagingApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.list_conversations.return_value = [
            Conversation(id="c-1", unread_count=2),
            Conversation(id="c-2"),
        ]
        repo.list_members.return_value = {"c-1": _members("alice", "bob")}

        result = await svc.list_conversations(db, "alice")

        assert [c.id for c in result] == ["c-1", "c-2"]
        assert len(result[0].members) == 2
        assert result[0].unread_count == 2
        assert result[1].members == []
