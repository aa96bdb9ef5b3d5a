from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable
from typing import Any, Mapping

import pytest
from bson.timestamp import Timestamp


class FakeCursor:
    """
    In-memory stand-in for a pymongo tailable cursor.

    Items are served in order: a mapping is returned, an exception is raised,
    and None simulates an await window that lapsed without new entries
    (StopIteration while the cursor stays alive). Once drained the cursor is
    dead, which the Oplog reads as exhaustion.
    """

    def __init__(self, items: Iterable[Any], close_error: Exception | None = None) -> None:
        self._items: deque[Any] = deque(items)
        self._close_error = close_error
        self.closed = False
        self.next_calls = 0

    @property
    def alive(self) -> bool:
        return bool(self._items)

    def next(self) -> Mapping[str, Any]:
        self.next_calls += 1
        if not self._items:
            raise StopIteration
        item = self._items.popleft()
        if item is None:
            raise StopIteration
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        self.closed = True
        if self._close_error is not None:
            raise self._close_error


@pytest.fixture
def make_cursor() -> Callable[..., FakeCursor]:
    """
    Factory fixture creating fake cursors.

    Usage:
        cursor = make_cursor([entry, AutoReconnect("reset"), None, entry])
    """
    def _create(items: Iterable[Any] = (), close_error: Exception | None = None) -> FakeCursor:
        return FakeCursor(items, close_error)

    return _create


@pytest.fixture
def make_entry() -> Callable[..., dict[str, Any]]:
    """
    Factory fixture creating raw oplog entries.

    Usage:
        entry = make_entry("i", ns="foo.bar", o={"foo": "bar"})
    """
    def _create(op: str, time: int = 1479561394, inc: int = 0, **fields: Any) -> dict[str, Any]:
        entry: dict[str, Any] = {"ts": Timestamp(time, inc), "v": 2, "op": op}
        entry.update(fields)
        return entry

    return _create
