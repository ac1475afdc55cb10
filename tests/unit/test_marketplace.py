"""Unit tests for PluginService and the plugin row mapper."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.sa_common.errors import PluginNotFoundError
from src.sa_marketplace.application.service import PluginService
from src.sa_marketplace.domain.models import Plugin
from src.sa_marketplace.infrastructure.persistence import _decode_nodes


class TestPluginService:
    async def test_missing_plugin(self) -> None:
        repo = AsyncMock()
        repo.get_plugin.return_value = None

        with pytest.raises(PluginNotFoundError):
            await PluginService(repo=repo).get_plugin(MagicMock(), "pl-404")

    async def test_create_passes_author_and_commits(self) -> None:
        repo = AsyncMock()
        repo.create_plugin.return_value = Plugin(
            id="pl-1", name="CopyX", author_id="alice", author_name="Alice",
            nodes=[{"id": "n1", "type": "trigger"}],
        )
        db = AsyncMock()

        result = await PluginService(repo=repo).create_plugin(
            db, "alice", "Alice", "CopyX", None, None, "trading", 0,
            [{"id": "n1", "type": "trigger"}],
        )

        assert result.author_name == "Alice"
        assert result.nodes == [{"id": "n1", "type": "trigger"}]
        args = repo.create_plugin.await_args.args
        assert args[6:8] == ("alice", "Alice")
        db.commit.assert_awaited_once()

    async def test_list_passes_category(self) -> None:
        repo = AsyncMock()
        repo.list_plugins.return_value = [Plugin(id="pl-1", name="CryptoPool", category="defi")]
        db = MagicMock()

        result = await PluginService(repo=repo).list_plugins(db, "defi")

        assert [p.name for p in result] == ["CryptoPool"]
        assert repo.list_plugins.await_args.args[1] == "defi"


class TestDecodeNodes:
    def test_json_text_is_parsed(self) -> None:
        assert _decode_nodes('[{"id": "n1"}]') == [{"id": "n1"}]

    def test_decoded_value_passes_through(self) -> None:
        assert _decode_nodes({"a": 1}) == {"a": 1}
        assert _decode_nodes(None) is None
