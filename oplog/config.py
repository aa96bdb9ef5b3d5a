from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

OPLOG_DATABASE = "local"
OPLOG_COLLECTION = "oplog.rs"


@dataclass
class OplogConfig:
    database: str = OPLOG_DATABASE
    collection: str = OPLOG_COLLECTION
    filter: Optional[Mapping[str, Any]] = None
    batch_size: Optional[int] = None
    max_await_time_ms: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not self.database or not self.collection:
            raise ValueError("database and collection must be non-empty")
        if self.batch_size is not None and (
            not isinstance(self.batch_size, int) or self.batch_size <= 0
        ):
            raise ValueError(
                "batch_size must be a positive integer; pymongo treats 0 as the server default"
            )
        if self.max_await_time_ms is not None and (
            not isinstance(self.max_await_time_ms, int) or self.max_await_time_ms <= 0
        ):
            raise ValueError("max_await_time_ms must be a positive integer (> 0)")
