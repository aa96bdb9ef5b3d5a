from .observe import (
    observe_decode_error,
    observe_operation,
    observe_stream_closed,
    observe_transport_error,
)

__all__ = [
    "observe_operation",
    "observe_decode_error",
    "observe_transport_error",
    "observe_stream_closed",
]
