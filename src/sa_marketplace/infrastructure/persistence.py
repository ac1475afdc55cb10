"""PluginRepository — plugin catalogue in raw SQL.

nodes is stored as JSONB. It is serialized here and bound as text with an
explicit cast; on read it may arrive as a JSON string or already decoded
depending on the driver's codec setup, and both are accepted.
"""

import json
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sa_common.errors import InternalError
from src.sa_marketplace.domain.models import Plugin

_COLUMNS = """
    id, name, description, icon, category, price, author_id, author_name,
    downloads, rating, is_official, status, nodes, created_at
"""

_LIST_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM plugins
    WHERE status = 'published'
      AND (CAST(:category AS TEXT) IS NULL OR category = CAST(:category AS TEXT))
    ORDER BY downloads DESC, name ASC
    LIMIT :limit
""")

_GET_SQL = text(f"SELECT {_COLUMNS} FROM plugins WHERE id = :id")

_INSERT_SQL = text(f"""
    INSERT INTO plugins
        (name, description, icon, category, price, author_id, author_name, nodes)
    VALUES
        (:name, :description, :icon, :category, :price, :author_id, :author_name,
         CAST(:nodes AS JSONB))
    RETURNING {_COLUMNS}
""")


def _decode_nodes(value: Any) -> Any:
    if isinstance(value, str):
        return json.loads(value)
    return value


def _row_to_plugin(row: object) -> Plugin:
    return Plugin(
        id=row.id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        icon=row.icon,  # type: ignore[attr-defined]
        category=row.category,  # type: ignore[attr-defined]
        price=row.price,  # type: ignore[attr-defined]
        author_id=row.author_id,  # type: ignore[attr-defined]
        author_name=row.author_name,  # type: ignore[attr-defined]
        downloads=row.downloads,  # type: ignore[attr-defined]
        rating=row.rating,  # type: ignore[attr-defined]
        is_official=row.is_official,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        nodes=_decode_nodes(row.nodes),  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class PluginRepository:
    async def list_plugins(
        self, db: AsyncSession, category: str | None, limit: int
    ) -> list[Plugin]:
        result = await db.execute(_LIST_SQL, {"category": category, "limit": limit})
        return [_row_to_plugin(row) for row in result.fetchall()]

    async def get_plugin(self, db: AsyncSession, plugin_id: str) -> Plugin | None:
        result = await db.execute(_GET_SQL, {"id": plugin_id})
        row = result.fetchone()
        return _row_to_plugin(row) if row else None

    async def create_plugin(
        self,
        db: AsyncSession,
        name: str,
        description: str | None,
        icon: str | None,
        category: str,
        price: int,
        author_id: str,
        author_name: str,
        nodes: Any,
    ) -> Plugin:
        result = await db.execute(
            _INSERT_SQL,
            {
                "name": name,
                "description": description,
                "icon": icon,
                "category": category,
                "price": price,
                "author_id": author_id,
                "author_name": author_name,
                "nodes": json.dumps(nodes) if nodes is not None else None,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Plugin insert returned no rows — this should never happen")
        return _row_to_plugin(row)
