"""
Typed tailing of a MongoDB replica set oplog.

Given a pymongo client connected to a replica set, iterate over its oplog as
a sequence of statically typed Operations:

    from pymongo import MongoClient
    from oplog import Oplog

    client = MongoClient("mongodb://localhost")
    with Oplog.builder().filter({"op": "i"}).build(client) as oplog:
        for operation in oplog:
            print(operation)
"""

from .builder import OplogBuilder
from .config import OplogConfig
from .decoder import decode
from .errors import (
    AccessFailure,
    DecodeError,
    InvalidOperation,
    MissingField,
    OplogError,
    TransportError,
    UnknownOperation,
)
from .models import (
    ApplyOps,
    Command,
    Delete,
    Insert,
    Noop,
    Operation,
    OperationType,
    OplogResult,
    Update,
)
from .stream import Oplog, RawCursor, StreamState
from .timestamps import timestamp_to_datetime

__version__ = "0.1.0"

__all__ = [
    "Oplog",
    "OplogBuilder",
    "OplogConfig",
    "RawCursor",
    "StreamState",
    "decode",
    "timestamp_to_datetime",
    "Operation",
    "OperationType",
    "OplogResult",
    "Noop",
    "Insert",
    "Update",
    "Delete",
    "Command",
    "ApplyOps",
    "OplogError",
    "TransportError",
    "DecodeError",
    "MissingField",
    "UnknownOperation",
    "InvalidOperation",
    "AccessFailure",
]
