"""PluginService — marketplace catalogue reads and publishing."""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.errors import PluginNotFoundError
from src.sa_marketplace.application.schemas import PluginItem
from src.sa_marketplace.infrastructure.persistence import PluginRepository

logger = logging.getLogger("sa.marketplace")

_PLUGIN_LIST_LIMIT = 100


class PluginService:
    def __init__(self, repo: PluginRepository | None = None) -> None:
        self._repo = repo or PluginRepository()

    async def list_plugins(
        self, db: AsyncSession, category: str | None = None
    ) -> list[PluginItem]:
        rows = await self._repo.list_plugins(db, category, _PLUGIN_LIST_LIMIT)
        return [PluginItem.from_domain(p) for p in rows]

    async def get_plugin(self, db: AsyncSession, plugin_id: str) -> PluginItem:
        plugin = await self._repo.get_plugin(db, plugin_id)
        if plugin is None:
            raise PluginNotFoundError(plugin_id)
        return PluginItem.from_domain(plugin)

    async def create_plugin(
        self,
        db: AsyncSession,
        author_id: str,
        author_name: str,
        name: str,
        description: str | None,
        icon: str | None,
        category: str,
        price: int,
        nodes: Any,
    ) -> PluginItem:
        try:
            plugin = await self._repo.create_plugin(
                db, name, description, icon, category, price, author_id, author_name, nodes
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Plugin %s published by %s", plugin.id, author_id)
        return PluginItem.from_domain(plugin)
