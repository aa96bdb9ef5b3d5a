from __future__ import annotations

from enum import Enum


class AccessFailure(str, Enum):
    NOT_PRESENT = "not present"
    UNEXPECTED_TYPE = "unexpected type"


class OplogError(Exception):
    """Base exception for oplog errors."""


class TransportError(OplogError):
    """Any failure reported by the MongoDB driver while tailing."""

    def __init__(self, error: Exception) -> None:
        super().__init__(str(error))
        self.error = error


class DecodeError(OplogError):
    """A raw oplog document could not be converted to an Operation."""


class MissingField(DecodeError):
    """A required field was absent or held an unexpected type."""

    def __init__(self, field: str, failure: AccessFailure) -> None:
        super().__init__(f"Field {field!r} is {failure.value}")
        self.field = field
        self.failure = failure


class UnknownOperation(DecodeError):
    """The op field held an unsupported operation code."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Unknown operation type found: {code}")
        self.code = code


class InvalidOperation(DecodeError):
    """An applyOps entry was not itself a document."""

    def __init__(self) -> None:
        super().__init__("Invalid operation")
