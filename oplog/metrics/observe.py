from __future__ import annotations

from .registry import (
    OPLOG_DECODE_ERRORS_TOTAL,
    OPLOG_OPERATIONS_TOTAL,
    OPLOG_PULL_LATENCY_SECONDS,
    OPLOG_STREAMS_CLOSED_TOTAL,
    OPLOG_TRANSPORT_ERRORS_TOTAL,
)


def _database_of(namespace: str | None) -> str:
    if not namespace:
        return ""
    return namespace.split(".", 1)[0]


def observe_operation(op_type: str, namespace: str | None, latency_s: float) -> None:
    """
    Record a successfully decoded operation.

    Args:
        op_type: Operation class name (e.g. "Insert", "ApplyOps")
        namespace: Operation namespace; only its database part is used as a label
        latency_s: Time spent waiting on the cursor for this pull
    """
    OPLOG_OPERATIONS_TOTAL.labels(database=_database_of(namespace), op_type=op_type).inc()
    OPLOG_PULL_LATENCY_SECONDS.observe(latency_s)


def observe_decode_error(error: str, latency_s: float) -> None:
    OPLOG_DECODE_ERRORS_TOTAL.labels(error=error).inc()
    OPLOG_PULL_LATENCY_SECONDS.observe(latency_s)


def observe_transport_error(latency_s: float) -> None:
    OPLOG_TRANSPORT_ERRORS_TOTAL.inc()
    OPLOG_PULL_LATENCY_SECONDS.observe(latency_s)


def observe_stream_closed(reason: str) -> None:
    """reason is "exhausted" or "released"."""
    OPLOG_STREAMS_CLOSED_TOTAL.labels(reason=reason).inc()
