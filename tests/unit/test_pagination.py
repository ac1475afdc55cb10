"""Unit tests for opaque cursor helpers."""

from datetime import UTC, datetime

from src.sa_common.pagination import (
    id_cursor_decode,
    id_cursor_encode,
    ts_cursor_decode,
    ts_cursor_encode,
)


def test_id_cursor_round_trip() -> None:
    assert id_cursor_decode(id_cursor_encode(12345)) == 12345


def test_id_cursor_none() -> None:
    assert id_cursor_decode(None) is None


def test_id_cursor_garbage_is_no_cursor() -> None:
    assert id_cursor_decode("not-base64!!") is None


def test_ts_cursor_round_trip_gives_datetime() -> None:
    ts = datetime(2026, 3, 1, 12, 30, tzinfo=UTC)
    decoded_ts, decoded_id = ts_cursor_decode(ts_cursor_encode(ts, "post-9"))
    assert decoded_ts == ts
    assert decoded_id == "post-9"


def test_ts_cursor_garbage_is_no_cursor() -> None:
    assert ts_cursor_decode("%%%") == (None, None)
