"""
Print every operation applied to a replica set as it is written.

Usage:
    oplog-tail --uri mongodb://localhost --op i --namespace foo.bar
"""

from __future__ import annotations

import argparse
import logging
from typing import Any, Optional, Sequence

from pymongo import MongoClient

from .builder import OplogBuilder
from .errors import OplogError

logger = logging.getLogger(__name__)


def build_filter(ops: Sequence[str], namespace: Optional[str]) -> Optional[dict[str, Any]]:
    query: dict[str, Any] = {}
    if len(ops) == 1:
        query["op"] = ops[0]
    elif ops:
        query["op"] = {"$in": list(ops)}
    if namespace:
        query["ns"] = namespace
    return query or None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oplog-tail",
        description="Tail a MongoDB replica set oplog and print each operation.",
    )
    parser.add_argument("--uri", default="mongodb://localhost", help="MongoDB connection URI")
    parser.add_argument(
        "--op",
        action="append",
        default=[],
        choices=["n", "i", "u", "d", "c"],
        help="Only print operations with this code (repeatable)",
    )
    parser.add_argument("--namespace", help="Only print operations on this <db>.<collection>")
    parser.add_argument("--batch-size", type=int, help="Cursor batch size")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Run the tail loop. Always returns a non-zero exit code: the oplog is
    endless, so reaching the end of the loop is an anomaly.
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    builder = OplogBuilder()
    query = build_filter(args.op, args.namespace)
    if query is not None:
        builder.filter(query)
    if args.batch_size is not None:
        builder.batch_size(args.batch_size)

    client: MongoClient = MongoClient(args.uri)
    try:
        with builder.build(client) as oplog:
            for result in oplog.iter_results():
                if not result.ok:
                    logger.error("Tailing stopped: %s", result.error)
                    return 1
                print(result.operation, flush=True)
    except OplogError as exc:
        logger.error("Tailing stopped: %s", exc)
        return 1
    finally:
        client.close()

    logger.error(
        "Oplog cursor ended. This probably means the oplog.rs collection "
        "is empty. See https://jira.mongodb.org/browse/SERVER-13955"
    )
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
