"""
Conversion of raw oplog documents into typed Operations.

Any document may arrive from the cursor, so every required field is read
through an accessor that fails explicitly with MissingField. Payload documents
(``o``, ``o2``) are passed through by reference and never interpreted, apart
from the ``msg`` of a no-op and the ``applyOps`` array of a command.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from bson.timestamp import Timestamp

from .errors import AccessFailure, InvalidOperation, MissingField, UnknownOperation
from .models import (
    ApplyOps,
    Command,
    Delete,
    Insert,
    Noop,
    Operation,
    OperationType,
    Update,
)
from .timestamps import timestamp_to_datetime


def _get(document: Mapping[str, Any], key: str) -> Any:
    try:
        return document[key]
    except KeyError:
        raise MissingField(key, AccessFailure.NOT_PRESENT) from None


def get_str(document: Mapping[str, Any], key: str) -> str:
    value = _get(document, key)
    if not isinstance(value, str):
        raise MissingField(key, AccessFailure.UNEXPECTED_TYPE)
    return value


def get_timestamp(document: Mapping[str, Any], key: str) -> Timestamp:
    value = _get(document, key)
    if not isinstance(value, Timestamp):
        raise MissingField(key, AccessFailure.UNEXPECTED_TYPE)
    return value


def get_document(document: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = _get(document, key)
    if not isinstance(value, Mapping):
        raise MissingField(key, AccessFailure.UNEXPECTED_TYPE)
    return value


def get_array(document: Mapping[str, Any], key: str) -> Sequence[Any]:
    value = _get(document, key)
    if not isinstance(value, (list, tuple)):
        raise MissingField(key, AccessFailure.UNEXPECTED_TYPE)
    return value


def decode(document: Mapping[str, Any]) -> Operation:
    """
    Convert one raw oplog document into an Operation.

    Args:
        document: A document read from ``local.oplog.rs`` (or an entry of an
                  ``applyOps`` array)

    Returns:
        The Operation variant matching the document's ``op`` code

    Raises:
        MissingField: If ``op`` or a field required by that code is absent or
                      of the wrong type
        UnknownOperation: If ``op`` is not one of n, i, u, d, c
        InvalidOperation: If an ``applyOps`` entry is not a document

    Example:
        >>> decode({
        ...     "ts": Timestamp(1479561394, 0),
        ...     "op": "i",
        ...     "ns": "foo.bar",
        ...     "o": {"foo": "bar"},
        ... }).namespace
        'foo.bar'
    """
    op = get_str(document, "op")

    if op == OperationType.NOOP.value:
        return _decode_noop(document)
    if op == OperationType.INSERT.value:
        return _decode_insert(document)
    if op == OperationType.UPDATE.value:
        return _decode_update(document)
    if op == OperationType.DELETE.value:
        return _decode_delete(document)
    if op == OperationType.COMMAND.value:
        return _decode_command(document)

    raise UnknownOperation(op)


def _decode_value(value: Any) -> Operation:
    if not isinstance(value, Mapping):
        raise InvalidOperation()
    return decode(value)


def _decode_noop(document: Mapping[str, Any]) -> Noop:
    ts = get_timestamp(document, "ts")
    # "o" is not always a document on no-ops
    message = None
    o = document.get("o")
    if isinstance(o, Mapping):
        msg = o.get("msg")
        if isinstance(msg, str):
            message = msg

    return Noop(
        timestamp=timestamp_to_datetime(ts),
        message=message,
        increment=ts.inc,
    )


def _decode_insert(document: Mapping[str, Any]) -> Insert:
    ts = get_timestamp(document, "ts")
    ns = get_str(document, "ns")
    o = get_document(document, "o")

    return Insert(
        timestamp=timestamp_to_datetime(ts),
        namespace=ns,
        document=o,
        increment=ts.inc,
    )


def _decode_update(document: Mapping[str, Any]) -> Update:
    ts = get_timestamp(document, "ts")
    ns = get_str(document, "ns")
    o = get_document(document, "o")
    o2 = get_document(document, "o2")

    return Update(
        timestamp=timestamp_to_datetime(ts),
        namespace=ns,
        query=o2,
        update=o,
        increment=ts.inc,
    )


def _decode_delete(document: Mapping[str, Any]) -> Delete:
    ts = get_timestamp(document, "ts")
    ns = get_str(document, "ns")
    o = get_document(document, "o")

    return Delete(
        timestamp=timestamp_to_datetime(ts),
        namespace=ns,
        query=o,
        increment=ts.inc,
    )


def _decode_command(document: Mapping[str, Any]) -> Command | ApplyOps:
    """
    Decode a command, which is an ApplyOps when ``o.applyOps`` is an array.

    Entries are decoded in order; the first failing entry aborts the whole
    command.
    """
    ts = get_timestamp(document, "ts")
    ns = get_str(document, "ns")
    o = get_document(document, "o")

    try:
        entries = get_array(o, "applyOps")
    except MissingField:
        return Command(
            timestamp=timestamp_to_datetime(ts),
            namespace=ns,
            command=o,
            increment=ts.inc,
        )

    return ApplyOps(
        timestamp=timestamp_to_datetime(ts),
        namespace=ns,
        operations=tuple(_decode_value(entry) for entry in entries),
        increment=ts.inc,
    )
