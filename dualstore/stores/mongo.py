"""
DualStore API - Document Resource Store
========================================

What:  ResourceStore implementation over the MongoDB `resources` collection.
How:   Thin async wrapper over a pymongo AsyncCollection. Documents are
       stored as {_id: ObjectId, name, description}; the API exposes `_id`
       as a 24-character hex `id`.
Who:   Wired into the /api/mongo/resources route group by the bootstrap.

Identifier format:
    Ids arrive from the URL as plain strings. Only this adapter knows what a
    valid ObjectId looks like, so it owns the check (validate_id). A string
    that is not exactly 24 hex characters raises InvalidIdentifierError and
    never reaches the server.
"""

import logging
import re
from typing import Any, List, Mapping, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from dualstore.exceptions import BackendError, InvalidIdentifierError
from dualstore.schemas.resource import DocumentResource, ResourceCreate
from dualstore.stores.base import ResourceStore

logger = logging.getLogger(__name__)

# ObjectId.is_valid() also accepts 12-byte values; URL ids must be hex text.
_OBJECT_ID_PATTERN = re.compile(r"[0-9a-fA-F]{24}")


def _to_resource(doc: Mapping[str, Any]) -> DocumentResource:
    # Documents written outside the API may lack either field
    return DocumentResource(
        id=str(doc["_id"]),
        name=doc.get("name") or "",
        description=doc.get("description") or "",
    )


class MongoResourceStore(ResourceStore[str, DocumentResource]):
    """
    Document adapter. ObjectIds are assigned by the driver on insert.

    Error Handling:
        PyMongoError (server selection timeout, auto-reconnect, operation
        failure) is logged and re-raised as BackendError.
    """

    def __init__(self, collection: AsyncCollection):
        self._collection = collection

    @staticmethod
    def validate_id(raw_id: str) -> ObjectId:
        """
        Parse a URL id into an ObjectId.

        Raises:
            InvalidIdentifierError: `raw_id` is not 24 hex characters.
        """
        if not isinstance(raw_id, str) or not _OBJECT_ID_PATTERN.fullmatch(raw_id):
            raise InvalidIdentifierError(raw_id=str(raw_id))
        return ObjectId(raw_id)

    async def list(self) -> List[DocumentResource]:
        try:
            docs = await self._collection.find({}).to_list(length=None)
        except PyMongoError as e:
            raise self._backend_error("list", e) from e
        return [_to_resource(doc) for doc in docs]

    async def get_by_id(self, resource_id: str) -> Optional[DocumentResource]:
        oid = self.validate_id(resource_id)
        try:
            doc = await self._collection.find_one({"_id": oid})
        except PyMongoError as e:
            raise self._backend_error("get_by_id", e, resource_id) from e
        return _to_resource(doc) if doc is not None else None

    async def create(self, data: ResourceCreate) -> DocumentResource:
        document = {"name": data.name, "description": data.description}
        try:
            result = await self._collection.insert_one(document)
        except PyMongoError as e:
            raise self._backend_error("create", e) from e
        logger.info("Created document resource %s", result.inserted_id)
        return DocumentResource(
            id=str(result.inserted_id),
            name=data.name,
            description=data.description,
        )

    async def update(
        self, resource_id: str, data: ResourceCreate
    ) -> Optional[DocumentResource]:
        oid = self.validate_id(resource_id)
        try:
            doc = await self._collection.find_one_and_update(
                {"_id": oid},
                {"$set": {"name": data.name, "description": data.description}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise self._backend_error("update", e, resource_id) from e
        return _to_resource(doc) if doc is not None else None

    async def delete(self, resource_id: str) -> bool:
        oid = self.validate_id(resource_id)
        try:
            result = await self._collection.delete_one({"_id": oid})
        except PyMongoError as e:
            raise self._backend_error("delete", e, resource_id) from e

        deleted = result.deleted_count == 1
        if deleted:
            logger.info("Deleted document resource %s", resource_id)
        return deleted

    async def ping(self) -> bool:
        try:
            await self._collection.database.command("ping")
            return True
        except PyMongoError as e:
            logger.warning("MongoDB ping failed: %s", str(e))
            return False

    @staticmethod
    def _backend_error(
        operation: str, error: Exception, resource_id: Optional[str] = None
    ) -> BackendError:
        logger.error("MongoDB %s failed: %s", operation, str(error), exc_info=True)
        context = {"backend": "mongo", "operation": operation, "error_type": type(error).__name__}
        if resource_id is not None:
            context["resource_id"] = resource_id
        return BackendError(context=context)
