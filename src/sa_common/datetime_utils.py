"""UTC datetime utilities."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def iso_or_none(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt is not None else None


def seconds_until(target: datetime | None, now: datetime | None = None) -> int | None:
    """Whole seconds from now until target, floored at 0. None if no target."""
    if target is None:
        return None
    now = now or utc_now()
    if target.tzinfo is None:
        target = target.replace(tzinfo=timezone.utc)
    return max(0, int((target - now).total_seconds()))
