from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping, Optional

from pymongo import CursorType, MongoClient
from pymongo.errors import PyMongoError

from .config import OplogConfig
from .errors import TransportError
from .stream import Oplog

logger = logging.getLogger(__name__)


class OplogBuilder:
    """
    A builder for an Oplog.

    Configures a filter on the oplog so that only operations matching a given
    criteria are returned (e.g. to set a start time or filter out unwanted
    operation types), and an optional batch size for the cursor.

    Usage:
        oplog = (
            Oplog.builder()
            .filter({"op": "i"})
            .batch_size(100)
            .build(client)
        )
    """

    def __init__(self, config: Optional[OplogConfig] = None) -> None:
        self._config = config if config is not None else OplogConfig()

    @property
    def config(self) -> OplogConfig:
        return self._config

    def filter(self, filter: Mapping[str, Any]) -> "OplogBuilder":
        """
        Provide a filter for the oplog.

        Empty by default so all operations are returned.
        """
        self._config = replace(self._config, filter=filter)
        return self

    def batch_size(self, batch_size: int) -> "OplogBuilder":
        """
        Set the batch size of the underlying cursor.

        Not set by default, falling back on the server's default.

        Raises:
            ValueError: If batch_size is not a positive integer
        """
        self._config = replace(self._config, batch_size=batch_size)
        return self

    def max_await_time_ms(self, max_await_time_ms: int) -> "OplogBuilder":
        """Set how long the server waits for new entries before returning an empty batch."""
        self._config = replace(self._config, max_await_time_ms=max_await_time_ms)
        return self

    def database(self, name: str) -> "OplogBuilder":
        self._config = replace(self._config, database=name)
        return self

    def collection(self, name: str) -> "OplogBuilder":
        self._config = replace(self._config, collection=name)
        return self

    def build(self, client: MongoClient) -> Oplog:
        """
        Issue the tailable query and build the Oplog over the client provided.

        The cursor never times out on the server and keeps waiting past the
        current end of the oplog.

        Raises:
            TransportError: If the driver fails to issue the query
        """
        cfg = self._config
        options: dict[str, Any] = {
            "cursor_type": CursorType.TAILABLE_AWAIT,
            "no_cursor_timeout": True,
        }
        if cfg.batch_size is not None:
            options["batch_size"] = cfg.batch_size

        try:
            cursor = client[cfg.database][cfg.collection].find(cfg.filter, **options)
            if cfg.max_await_time_ms is not None:
                cursor = cursor.max_await_time_ms(cfg.max_await_time_ms)
        except PyMongoError as exc:
            raise TransportError(exc) from exc

        logger.info(
            "Tailing %s.%s with filter=%s batch_size=%s",
            cfg.database,
            cfg.collection,
            cfg.filter,
            cfg.batch_size,
        )
        return Oplog(cursor)
