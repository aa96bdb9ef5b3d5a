from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterator
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Optional, Protocol

from bson.errors import BSONError
from pymongo.errors import PyMongoError

from .decoder import decode
from .errors import DecodeError, OplogError, TransportError
from .metrics import (
    observe_decode_error,
    observe_operation,
    observe_stream_closed,
    observe_transport_error,
)
from .models import Operation, OplogResult

if TYPE_CHECKING:
    from pymongo import MongoClient

    from .builder import OplogBuilder
    from .config import OplogConfig

logger = logging.getLogger(__name__)


class RawCursor(Protocol):
    """
    The "get next item" primitive an Oplog pulls from.

    pymongo's Cursor satisfies this protocol. ``next()`` returns a raw
    document, raises PyMongoError or BSONError on a driver failure, or raises StopIteration
    when no document is available. The cursor is exhausted once it raises
    StopIteration while ``alive`` is False.
    """

    @property
    def alive(self) -> bool:
        ...

    def next(self) -> Mapping[str, Any]:
        ...

    def close(self) -> None:
        ...


class StreamState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class Oplog:
    """
    A MongoDB replica set oplog, pulled as a sequence of typed Operations.

    Each pull blocks on the underlying tailable cursor until one of three
    outcomes is available:
    - a raw document: decoded and returned, or its DecodeError raised
    - a driver failure: raised as TransportError
    - exhaustion: the stream closes and iteration ends

    Errors do not close the stream; the next pull asks the cursor again.
    Whether more items arrive after a TransportError is up to the driver.
    Exhaustion is final: a closed Oplog never reconnects or resumes.

    Exhaustion should not happen against a live, non-empty oplog (see
    https://jira.mongodb.org/browse/SERVER-13955); what to do about it is left
    to the caller.

    Pulls are not re-entrant: one Oplog serves one consumer.

    Usage:
        with Oplog.builder().filter({"op": "i"}).build(client) as oplog:
            # Option 1: errors are raised, iteration stops on the first one
            for operation in oplog:
                print(operation)

            # Option 2: errors are yielded as results
            for result in oplog.iter_results():
                if result.ok:
                    print(result.operation)
    """

    def __init__(self, cursor: RawCursor) -> None:
        self._cursor = cursor
        self._state = StreamState.OPEN
        self._pulling = threading.Lock()

    @classmethod
    def open(cls, client: "MongoClient", config: Optional["OplogConfig"] = None) -> "Oplog":
        """Tail the oplog with default options (no filter)."""
        from .builder import OplogBuilder

        return OplogBuilder(config).build(client)

    @staticmethod
    def builder() -> "OplogBuilder":
        """Builder to configure the Oplog."""
        from .builder import OplogBuilder

        return OplogBuilder()

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is StreamState.CLOSED

    def __iter__(self) -> "Oplog":
        return self

    def __next__(self) -> Operation:
        """
        Pull the next operation.

        Raises:
            StopIteration: If the stream is closed
            DecodeError: If the pulled document is not a valid operation
            TransportError: If the driver reported a failure
            RuntimeError: If another pull is already in progress
        """
        if not self._pulling.acquire(blocking=False):
            raise RuntimeError("Oplog does not support concurrent pulls")
        try:
            return self._pull()
        finally:
            self._pulling.release()

    def next(self) -> Optional[Operation]:
        """
        Pull the next operation, returning None once the stream is closed.

        Raises:
            DecodeError: If the pulled document is not a valid operation
            TransportError: If the driver reported a failure
        """
        try:
            return self.__next__()
        except StopIteration:
            return None

    def iter_results(self) -> Iterator[OplogResult]:
        """
        Yield one OplogResult per pull until the stream is closed.

        Unlike plain iteration, decode and transport errors are yielded as
        results instead of ending the loop.
        """
        while True:
            try:
                operation = self.__next__()
            except StopIteration:
                return
            except OplogError as exc:
                yield OplogResult(error=exc)
            else:
                yield OplogResult(operation=operation)

    def close(self) -> None:
        """
        Release the underlying cursor. Idempotent.
        """
        self._close("released")

    def __enter__(self) -> "Oplog":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    def _pull(self) -> Operation:
        if self._state is StreamState.CLOSED:
            raise StopIteration

        start_time = time.monotonic()
        raw = self._fetch(start_time)
        latency = time.monotonic() - start_time

        if raw is None:
            logger.info(
                "Oplog cursor ended. This probably means the oplog collection "
                "is empty. See https://jira.mongodb.org/browse/SERVER-13955"
            )
            self._close("exhausted")
            raise StopIteration

        try:
            operation = decode(raw)
        except DecodeError as exc:
            logger.warning("Failed to decode oplog entry: %s", exc)
            _record(observe_decode_error, type(exc).__name__, latency)
            raise

        logger.debug("Decoded oplog entry: %s", operation)
        _record(
            observe_operation,
            type(operation).__name__,
            getattr(operation, "namespace", None),
            latency,
        )
        return operation

    def _fetch(self, start_time: float) -> Optional[Mapping[str, Any]]:
        """
        Wait for the next raw document. Returns None when the cursor is exhausted.
        """
        while True:
            try:
                return self._cursor.next()
            except StopIteration:
                if not self._cursor.alive:
                    return None
                # await window lapsed on a live tailable cursor
            except (PyMongoError, BSONError) as exc:
                # pymongo decodes each batch with bson and does not wrap its errors
                logger.error("Oplog cursor failed: %s", exc)
                _record(observe_transport_error, time.monotonic() - start_time)
                raise TransportError(exc) from exc

    def _close(self, reason: str) -> None:
        if self._state is StreamState.CLOSED:
            return
        self._state = StreamState.CLOSED
        try:
            self._cursor.close()
        except (PyMongoError, BSONError) as exc:
            # Already closed; a failed cursor release must not replace the pull outcome
            logger.warning("Failed to release oplog cursor: %s", exc, exc_info=True)
        finally:
            _record(observe_stream_closed, reason)


def _record(observe, *args) -> None:
    # Metrics must never mask the pull outcome
    try:
        observe(*args)
    except Exception:
        logger.debug("Failed to record oplog metrics", exc_info=True)
