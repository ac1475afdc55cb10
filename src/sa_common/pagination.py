"""Opaque cursor utilities for keyset pagination.

Two cursor shapes are used:
  {"id": <int>}                  BIGSERIAL tables (coin_transactions)
  {"ts": "<ISO>", "id": "<str>"} VARCHAR-keyed tables ordered by created_at
Both are Base64 JSON strings. A malformed cursor decodes to "no cursor".
"""

import base64
import json
from datetime import datetime


def id_cursor_encode(last_id: int) -> str:
    """Encode a BIGINT primary key into an opaque Base64 cursor string."""
    payload = json.dumps({"id": last_id})
    return base64.b64encode(payload.encode()).decode()


def id_cursor_decode(cursor: str | None) -> int | None:
    """Decode a cursor string back to the last seen id. Returns None on error."""
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.b64decode(cursor.encode()).decode())
        return int(payload["id"])
    except Exception:
        return None


def ts_cursor_encode(created_at: datetime, last_id: str) -> str:
    """Encode composite (created_at, id) cursor from the last row in a page."""
    payload = {"ts": created_at.isoformat(), "id": last_id}
    return base64.b64encode(json.dumps(payload).encode()).decode()


def ts_cursor_decode(cursor: str | None) -> tuple[datetime | None, str | None]:
    """Decode composite cursor -> (created_at, id), or (None, None) on error.

    asyncpg requires a real datetime for TIMESTAMPTZ parameters, so the
    timestamp is parsed here rather than in every repository.
    """
    if cursor is None:
        return None, None
    try:
        data = json.loads(base64.b64decode(cursor.encode()).decode())
        return datetime.fromisoformat(data["ts"]), str(data["id"])
    except Exception:
        return None, None
