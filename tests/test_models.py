from __future__ import annotations

import dataclasses
from datetime import datetime, timezone

import pytest

from oplog.errors import InvalidOperation
from oplog.models import (
    ApplyOps,
    Command,
    Delete,
    Insert,
    Noop,
    OperationType,
    OplogResult,
    Update,
)

TS = datetime(2016, 11, 19, 13, 16, 34, tzinfo=timezone.utc)


class TestOperations:
    """Tests for the operation value records."""

    def test_operations_are_immutable(self) -> None:
        """Test that fields cannot be reassigned."""
        operation = Insert(timestamp=TS, namespace="foo.bar", document={"foo": "bar"})

        with pytest.raises(dataclasses.FrozenInstanceError):
            operation.namespace = "foo.baz"

    def test_operations_compare_by_value(self) -> None:
        """Test that equal fields mean equal operations."""
        assert Delete(TS, "foo.bar", {"_id": 1}) == Delete(TS, "foo.bar", {"_id": 1})
        assert Delete(TS, "foo.bar", {"_id": 1}) != Delete(TS, "foo.bar", {"_id": 2})
        assert Delete(TS, "foo.bar", {"_id": 1}, increment=1) != Delete(TS, "foo.bar", {"_id": 1})

    def test_op_types(self) -> None:
        """Test that each variant reports its oplog code."""
        assert Noop.op_type is OperationType.NOOP
        assert Insert.op_type is OperationType.INSERT
        assert Update.op_type is OperationType.UPDATE
        assert Delete.op_type is OperationType.DELETE
        assert Command.op_type is OperationType.COMMAND
        assert ApplyOps.op_type is OperationType.COMMAND

    def test_str(self) -> None:
        """Test the human readable rendering of each variant."""
        assert str(Noop(TS, "initiating set")) == "No-op at 2016-11-19 13:16:34+00:00: 'initiating set'"
        assert (
            str(Insert(TS, "foo.bar", {"foo": "bar"}))
            == "Insert into foo.bar at 2016-11-19 13:16:34+00:00: {'foo': 'bar'}"
        )
        assert (
            str(Update(TS, "foo.bar", {"_id": 1}, {"$set": {"a": 1}}))
            == "Update foo.bar with {'_id': 1} at 2016-11-19 13:16:34+00:00: {'$set': {'a': 1}}"
        )
        assert str(Delete(TS, "foo.bar", {"_id": 1})) == "Delete from foo.bar at 2016-11-19 13:16:34+00:00: {'_id': 1}"
        assert (
            str(Command(TS, "test.$cmd", {"create": "foo"}))
            == "Command test.$cmd at 2016-11-19 13:16:34+00:00: {'create': 'foo'}"
        )
        applied = ApplyOps(TS, "foo.$cmd", (Noop(TS), Noop(TS)))
        assert str(applied) == "ApplyOps foo.$cmd at 2016-11-19 13:16:34+00:00: 2 operations"


class TestOplogResult:
    """Tests for OplogResult."""

    def test_ok_result(self) -> None:
        """Test that a result with an operation is ok."""
        result = OplogResult(operation=Noop(TS))

        assert result.ok
        assert result.unwrap() == Noop(TS)

    def test_error_result(self) -> None:
        """Test that a result with an error raises it on unwrap."""
        result = OplogResult(error=InvalidOperation())

        assert not result.ok
        with pytest.raises(InvalidOperation):
            result.unwrap()

    def test_unwrap_returns_operation_without_error(self) -> None:
        """Test that unwrapping a successful result returns the same operation."""
        operation = Noop(TS, "hello")

        assert OplogResult(operation=operation).unwrap() is operation

    def test_requires_exactly_one_outcome(self) -> None:
        """Test that a result is never both or neither."""
        with pytest.raises(ValueError):
            OplogResult()
        with pytest.raises(ValueError):
            OplogResult(operation=Noop(TS), error=InvalidOperation())
