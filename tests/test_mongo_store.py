"""
DualStore API - Document Store Tests
=====================================

What:  Tests for MongoResourceStore.
How:   CRUD behaviour runs against the dict-backed FakeCollection; call-level
       assertions (what reaches the driver) use an AsyncMock collection.

What we test:
    ✅ identifier format check (24 hex characters only)
    ✅ malformed ids never reach the collection
    ✅ create/get/update/delete semantics and misses
    ✅ PyMongoError surfaces as BackendError
"""

import pytest
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import ServerSelectionTimeoutError

from dualstore.exceptions import BackendError, InvalidIdentifierError
from dualstore.schemas.resource import ResourceCreate
from dualstore.stores.mongo import MongoResourceStore


class TestValidateId:

    def test_accepts_24_hex_characters(self):
        raw = "507f1f77bcf86cd799439011"
        assert MongoResourceStore.validate_id(raw) == ObjectId(raw)

    def test_accepts_uppercase_hex(self):
        MongoResourceStore.validate_id("507F1F77BCF86CD799439011")

    @pytest.mark.parametrize(
        "raw",
        [
            "not-a-valid-id",
            "",
            "507f1f77bcf86cd79943901",     # 23 chars
            "507f1f77bcf86cd7994390111",   # 25 chars
            "507f1f77bcf86cd79943901g",    # non-hex
            "abcdefghijkl",                # 12 chars (a 12-byte ObjectId, not hex)
            "507f1f77bcf86cd799439011\n",
        ],
    )
    def test_rejects_malformed(self, raw):
        with pytest.raises(InvalidIdentifierError) as exc_info:
            MongoResourceStore.validate_id(raw)
        assert exc_info.value.message == "Invalid ID format"


class TestMongoStoreCrud:

    @pytest.mark.asyncio
    async def test_create_then_get_returns_same_values(self, mongo_store):
        created = await mongo_store.create(ResourceCreate(name="A", description="d"))

        assert len(created.id) == 24
        fetched = await mongo_store.get_by_id(created.id)
        assert fetched == created

    @pytest.mark.asyncio
    async def test_list_returns_documents_with_hex_ids(self, mongo_store):
        a = await mongo_store.create(ResourceCreate(name="A", description=""))
        b = await mongo_store.create(ResourceCreate(name="B", description=""))

        listed = await mongo_store.list()

        assert {r.id for r in listed} == {a.id, b.id}

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, mongo_store):
        assert await mongo_store.get_by_id(str(ObjectId())) is None

    @pytest.mark.asyncio
    async def test_update_replaces_fields(self, mongo_store):
        created = await mongo_store.create(ResourceCreate(name="A", description="d"))

        updated = await mongo_store.update(created.id, ResourceCreate(name="B", description="d2"))

        assert updated.id == created.id
        assert (updated.name, updated.description) == ("B", "d2")

    @pytest.mark.asyncio
    async def test_update_missing_returns_none_and_creates_nothing(self, mongo_store, fake_collection):
        result = await mongo_store.update(str(ObjectId()), ResourceCreate(name="B", description=""))

        assert result is None
        assert fake_collection.documents == {}

    @pytest.mark.asyncio
    async def test_delete_then_get_misses(self, mongo_store):
        created = await mongo_store.create(ResourceCreate(name="A", description="d"))

        assert await mongo_store.delete(created.id) is True
        assert await mongo_store.get_by_id(created.id) is None
        assert await mongo_store.delete(created.id) is False


class TestMongoStoreDriverCalls:

    @pytest.mark.asyncio
    async def test_update_uses_set_and_returns_after(self, mock_collection):
        oid = ObjectId()
        mock_collection.find_one_and_update.return_value = {
            "_id": oid, "name": "B", "description": "d2",
        }
        store = MongoResourceStore(mock_collection)

        result = await store.update(str(oid), ResourceCreate(name="B", description="d2"))

        mock_collection.find_one_and_update.assert_awaited_once_with(
            {"_id": oid},
            {"$set": {"name": "B", "description": "d2"}},
            return_document=ReturnDocument.AFTER,
        )
        assert result.id == str(oid)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", ["get_by_id", "update", "delete"])
    async def test_malformed_id_never_reaches_collection(self, mock_collection, operation):
        store = MongoResourceStore(mock_collection)
        args = ["bad-id"]
        if operation == "update":
            args.append(ResourceCreate(name="A", description=""))

        with pytest.raises(InvalidIdentifierError):
            await getattr(store, operation)(*args)

        mock_collection.find_one.assert_not_awaited()
        mock_collection.find_one_and_update.assert_not_awaited()
        mock_collection.delete_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_driver_error_becomes_backend_error(self, mock_collection):
        mock_collection.insert_one.side_effect = ServerSelectionTimeoutError("no servers")
        store = MongoResourceStore(mock_collection)

        with pytest.raises(BackendError) as exc_info:
            await store.create(ResourceCreate(name="A", description=""))

        assert exc_info.value.context["backend"] == "mongo"
        assert exc_info.value.context["error_type"] == "ServerSelectionTimeoutError"
        mock_collection.insert_one.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_ping(self, mock_collection):
        store = MongoResourceStore(mock_collection)
        assert await store.ping() is True

        mock_collection.database.command.side_effect = ServerSelectionTimeoutError("down")
        assert await store.ping() is False
