"""
DualStore API - Document Resource Route Handlers
=================================================

What:  CRUD endpoints under /api/mongo/resources backed by MongoDB.
How:   Same shape as the relational group, with one extra step: handlers
       taking an id first run it through store.validate_id(), so a malformed
       id answers 400 {"error": "Invalid ID format"} before any store call.

Routes:
    GET    /api/mongo/resources        → 200 [resource, ...]
    GET    /api/mongo/resources/{id}   → 200 resource | 404 | 400
    POST   /api/mongo/resources        → 201 resource
    PUT    /api/mongo/resources/{id}   → 200 resource | 404 | 400
    DELETE /api/mongo/resources/{id}   → 204 | 404 | 400
"""

from typing import List

from fastapi import APIRouter, Response, status

from dualstore.exceptions import NotFoundError
from dualstore.schemas.resource import (
    DocumentResource,
    ErrorResponse,
    ResourceCreate,
    ValidationErrorResponse,
)
from dualstore.stores.mongo import MongoResourceStore

_NOT_FOUND = {404: {"description": "Resource not found", "model": ErrorResponse}}
_INVALID = {400: {"description": "Invalid ID format or validation error", "model": ErrorResponse}}


def create_router(store: MongoResourceStore) -> APIRouter:
    """Build the /api/mongo/resources route group around `store`."""
    router = APIRouter(prefix="/api/mongo/resources", tags=["MongoDB Resources"])

    @router.get(
        "",
        response_model=List[DocumentResource],
        summary="List all resources",
    )
    async def list_resources() -> List[DocumentResource]:
        return await store.list()

    @router.get(
        "/{resource_id}",
        response_model=DocumentResource,
        responses={**_NOT_FOUND, **_INVALID},
        summary="Get a resource by id",
    )
    async def get_resource(resource_id: str) -> DocumentResource:
        store.validate_id(resource_id)
        resource = await store.get_by_id(resource_id)
        if resource is None:
            raise NotFoundError(resource_id=resource_id)
        return resource

    @router.post(
        "",
        response_model=DocumentResource,
        status_code=status.HTTP_201_CREATED,
        responses={400: {"description": "Validation error", "model": ValidationErrorResponse}},
        summary="Create a resource",
    )
    async def create_resource(body: ResourceCreate) -> DocumentResource:
        return await store.create(body)

    @router.put(
        "/{resource_id}",
        response_model=DocumentResource,
        responses={**_NOT_FOUND, **_INVALID},
        summary="Replace a resource's name and description",
    )
    async def update_resource(resource_id: str, body: ResourceCreate) -> DocumentResource:
        store.validate_id(resource_id)
        resource = await store.update(resource_id, body)
        if resource is None:
            raise NotFoundError(resource_id=resource_id)
        return resource

    @router.delete(
        "/{resource_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        responses={**_NOT_FOUND, **_INVALID},
        summary="Delete a resource",
    )
    async def delete_resource(resource_id: str) -> Response:
        store.validate_id(resource_id)
        if not await store.delete(resource_id):
            raise NotFoundError(resource_id=resource_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router
