"""
DualStore API - Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── session_factory:   async_sessionmaker on a fresh SQLite file (aiosqlite)
    ├── pg_store:          PostgresResourceStore over session_factory
    ├── fake_collection:   in-memory stand-in for a pymongo AsyncCollection
    ├── mongo_store:       MongoResourceStore over fake_collection
    ├── mock_collection:   AsyncMock collection for call assertions
    └── test_client:       HTTPX AsyncClient wired to an app built with the two stores
"""

import os

# Override settings for testing BEFORE any dualstore imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Any, Dict, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo import ReturnDocument

from dualstore.database import create_session_factory, ensure_schema
from dualstore.stores.mongo import MongoResourceStore
from dualstore.stores.postgres import PostgresResourceStore


class FakeCollection:
    """
    Dict-backed subset of the AsyncCollection API used by MongoResourceStore.

    Supports equality filters on `_id` and `$set` updates, which is all the
    adapter issues.
    """

    def __init__(self):
        self.documents: Dict[ObjectId, Dict[str, Any]] = {}
        self.database = MagicMock()
        self.database.command = AsyncMock(return_value={"ok": 1.0})

    def find(self, filter: Optional[dict] = None):
        cursor = MagicMock()
        cursor.to_list = AsyncMock(
            return_value=[dict(doc) for doc in self.documents.values()]
        )
        return cursor

    async def find_one(self, filter: dict):
        doc = self.documents.get(filter["_id"])
        return dict(doc) if doc is not None else None

    async def insert_one(self, document: dict):
        oid = ObjectId()
        document["_id"] = oid
        self.documents[oid] = dict(document)
        return MagicMock(inserted_id=oid)

    async def find_one_and_update(self, filter: dict, update: dict, return_document=None):
        doc = self.documents.get(filter["_id"])
        if doc is None:
            return None
        before = dict(doc)
        doc.update(update["$set"])
        return dict(doc) if return_document == ReturnDocument.AFTER else before

    async def delete_one(self, filter: dict):
        removed = self.documents.pop(filter["_id"], None)
        return MagicMock(deleted_count=1 if removed is not None else 0)


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """
    Provides a session factory on a throwaway SQLite database.

    What:    Real SQLAlchemy engine (aiosqlite driver) with the `resources`
             table created through ensure_schema().
    Why:     Exercises the real statements without a PostgreSQL server.
    """
    from sqlalchemy.ext.asyncio import create_async_engine

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'resources.db'}")
    await ensure_schema(engine)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def pg_store(session_factory):
    return PostgresResourceStore(session_factory)


@pytest.fixture
def fake_collection():
    return FakeCollection()


@pytest.fixture
def mongo_store(fake_collection):
    return MongoResourceStore(fake_collection)


@pytest.fixture
def mock_collection():
    """
    Provides a mock AsyncCollection.

    Usage:
        mock_collection.find_one.return_value = {"_id": oid, ...}
        mock_collection.find_one.assert_not_awaited()
    """
    collection = AsyncMock()
    collection.find = MagicMock()
    collection.database = MagicMock()
    collection.database.command = AsyncMock(return_value={"ok": 1.0})
    return collection


@pytest_asyncio.fixture
async def test_client(pg_store, mongo_store):
    """
    Provides an async HTTP test client for endpoint testing.

    How:     ASGITransport routes requests straight to an app built with the
             test stores; the lifespan is not run, so no real backend is used.
    """
    from dualstore.main import create_app

    app = create_app(pg_store=pg_store, mongo_store=mongo_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
