"""Unit tests for the assistant responder and AssistantService."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from src.sa_assistant.application.service import AssistantService
from src.sa_assistant.domain.responder import CANNED_RESPONSES, ChatMessage, reply_for


class TestReplyFor:
    @pytest.mark.parametrize(
        "prompt",
        [
            "Generate a business plan",
            "Find trending plugins",
            "Analyze my investments",
            "Create a workspace",
        ],
    )
    def test_quick_actions_have_canned_replies(self, prompt: str) -> None:
        assert reply_for(prompt) == CANNED_RESPONSES[prompt]

    def test_unknown_prompt_is_quoted_back(self) -> None:
        reply = reply_for("How do tournaments work?")
        assert '"How do tournaments work?"' in reply
        assert reply not in CANNED_RESPONSES.values()

    def test_match_is_exact(self) -> None:
        assert reply_for("generate a business plan") != CANNED_RESPONSES["Generate a business plan"]


class TestAssistantService:
    async def test_send_stores_prompt_and_reply(self) -> None:
        repo = AsyncMock()
        repo.add.side_effect = lambda db, user_id, role, content: ChatMessage(
            id=f"m-{role}", user_id=user_id, role=role, content=content,
            created_at=datetime.now(UTC),
        )
        db = AsyncMock()
        svc = AssistantService(repo=repo)

        result = await svc.send(db, "alice", "Create a workspace")

        assert result.user_message.role == "user"
        assert result.user_message.content == "Create a workspace"
        assert result.ai_message.role == "assistant"
        assert result.ai_message.content == CANNED_RESPONSES["Create a workspace"]
        assert repo.add.await_count == 2
        db.commit.assert_awaited_once()

    async def test_failed_insert_rolls_back(self) -> None:
        repo = AsyncMock()
        repo.add.side_effect = RuntimeError("db down")
        db = AsyncMock()

        with pytest.raises(RuntimeError):
            await AssistantService(repo=repo).send(db, "alice", "hi")

        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()
