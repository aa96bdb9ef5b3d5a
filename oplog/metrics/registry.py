from __future__ import annotations

from prometheus_client import Counter, Histogram

OPLOG_OPERATIONS_TOTAL = Counter(
    "oplog_operations_total",
    "Oplog entries successfully decoded into operations",
    ["database", "op_type"],
)

OPLOG_DECODE_ERRORS_TOTAL = Counter(
    "oplog_decode_errors_total",
    "Oplog entries that failed to decode",
    ["error"],
)

OPLOG_TRANSPORT_ERRORS_TOTAL = Counter(
    "oplog_transport_errors_total",
    "Driver failures surfaced while tailing the oplog",
)

OPLOG_PULL_LATENCY_SECONDS = Histogram(
    "oplog_pull_latency_seconds",
    "Time spent waiting on the cursor for a single pull",
)

OPLOG_STREAMS_CLOSED_TOTAL = Counter(
    "oplog_streams_closed_total",
    "Oplog streams that reached the closed state",
    ["reason"],
)
