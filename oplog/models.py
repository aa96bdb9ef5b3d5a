from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Mapping, Optional, Union, cast

from .errors import OplogError


class OperationType(str, Enum):
    NOOP = "n"
    INSERT = "i"
    UPDATE = "u"
    DELETE = "d"
    COMMAND = "c"


@dataclass(frozen=True)
class Noop:
    """
    A no-op as inserted periodically by MongoDB or used to initiate a replica set.
    """
    op_type: ClassVar[OperationType] = OperationType.NOOP

    timestamp: datetime
    message: Optional[str] = None
    # raw intra-second ordinal of the source ts
    increment: int = 0

    def __str__(self) -> str:
        return f"No-op at {self.timestamp}: {self.message!r}"


@dataclass(frozen=True)
class Insert:
    """
    An insert of a document into a namespace.
    """
    op_type: ClassVar[OperationType] = OperationType.INSERT

    timestamp: datetime
    namespace: str
    document: Mapping[str, Any]
    increment: int = 0

    def __str__(self) -> str:
        return f"Insert into {self.namespace} at {self.timestamp}: {self.document}"


@dataclass(frozen=True)
class Update:
    """
    An update of documents in a namespace matching ``query``.
    """
    op_type: ClassVar[OperationType] = OperationType.UPDATE

    timestamp: datetime
    namespace: str
    query: Mapping[str, Any]
    update: Mapping[str, Any]
    increment: int = 0

    def __str__(self) -> str:
        return f"Update {self.namespace} with {self.query} at {self.timestamp}: {self.update}"


@dataclass(frozen=True)
class Delete:
    """
    The deletion of documents in a namespace matching ``query``.
    """
    op_type: ClassVar[OperationType] = OperationType.DELETE

    timestamp: datetime
    namespace: str
    query: Mapping[str, Any]
    increment: int = 0

    def __str__(self) -> str:
        return f"Delete from {self.namespace} at {self.timestamp}: {self.query}"


@dataclass(frozen=True)
class Command:
    """
    A command such as the creation or deletion of a collection.
    """
    op_type: ClassVar[OperationType] = OperationType.COMMAND

    timestamp: datetime
    namespace: str
    command: Mapping[str, Any]
    increment: int = 0

    def __str__(self) -> str:
        return f"Command {self.namespace} at {self.timestamp}: {self.command}"


@dataclass(frozen=True)
class ApplyOps:
    """
    A command applying several oplog operations as a unit.

    ``operations`` keeps the order of the source ``applyOps`` array and may
    itself contain nested ApplyOps.
    """
    op_type: ClassVar[OperationType] = OperationType.COMMAND

    timestamp: datetime
    namespace: str
    operations: tuple["Operation", ...]
    increment: int = 0

    def __str__(self) -> str:
        return (
            f"ApplyOps {self.namespace} at {self.timestamp}: "
            f"{len(self.operations)} operations"
        )


Operation = Union[Noop, Insert, Update, Delete, Command, ApplyOps]


@dataclass(frozen=True)
class OplogResult:
    """
    Outcome of a single pull: exactly one of ``operation`` or ``error`` is set.
    """
    operation: Optional[Operation] = None
    error: Optional[OplogError] = None

    def __post_init__(self) -> None:
        if (self.operation is None) == (self.error is None):
            raise ValueError("OplogResult requires exactly one of operation or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Operation:
        """Return the operation, or raise the pulled error."""
        if self.error is not None:
            raise self.error
        return cast(Operation, self.operation)
