from __future__ import annotations

import os
import uuid
from collections.abc import Iterator

import pytest
from pymongo import MongoClient
from pymongo.errors import PyMongoError


@pytest.fixture(scope="session")
def mongo_url() -> str:
    """
    MongoDB replica set URL for integration tests.

    Set OPLOG_TEST_MONGO_URL to run them, e.g.
    mongodb://127.0.0.1:27017/?replicaSet=rs0&directConnection=true
    """
    url = os.environ.get("OPLOG_TEST_MONGO_URL")
    if not url:
        pytest.skip("OPLOG_TEST_MONGO_URL is not set")
    return url


@pytest.fixture(scope="session")
def mongo_client(mongo_url: str) -> Iterator[MongoClient]:
    """
    Session-scoped MongoClient.

    We fail fast if the server is unreachable, so failures are actionable.
    """
    client: MongoClient = MongoClient(mongo_url, serverSelectionTimeoutMS=2000)
    try:
        client.admin.command("ping")
    except PyMongoError as exc:  # pragma: no cover
        pytest.fail(
            "MongoDB test server is not reachable.\n"
            f"- OPLOG_TEST_MONGO_URL={mongo_url!r}\n"
            "- The server must run as a replica set so that local.oplog.rs exists.\n"
            f"- Underlying error: {exc}",
            pytrace=False,
        )

    yield client

    client.close()


@pytest.fixture
def namespace(mongo_client: MongoClient) -> Iterator[str]:
    """A unique <db>.<collection> namespace, dropped after the test."""
    collection = f"oplog_test_{uuid.uuid4().hex[:10]}"

    yield f"oplog_tests.{collection}"

    mongo_client["oplog_tests"].drop_collection(collection)
