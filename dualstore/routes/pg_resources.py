"""
DualStore API - Relational Resource Route Handlers
===================================================

What:  CRUD endpoints under /api/pg/resources backed by PostgreSQL.
How:   create_router() builds the route group around the store it is given.
       Handlers validate through FastAPI (integer path id, ResourceCreate
       body), call the store, and turn a miss into NotFoundError.
Who:   Mounted by create_app() in main.py.

Routes:
    GET    /api/pg/resources        → 200 [resource, ...]
    GET    /api/pg/resources/{id}   → 200 resource | 404
    POST   /api/pg/resources        → 201 resource
    PUT    /api/pg/resources/{id}   → 200 resource | 404
    DELETE /api/pg/resources/{id}   → 204 | 404
"""

from typing import List

from fastapi import APIRouter, Path, Response, status

from dualstore.exceptions import NotFoundError
from dualstore.schemas.resource import (
    ErrorResponse,
    RelationalResource,
    ResourceCreate,
    ValidationErrorResponse,
)
from dualstore.stores.base import ResourceStore

# Upper bound of a PostgreSQL SERIAL column
MAX_RESOURCE_ID = 2_147_483_647

_NOT_FOUND = {404: {"description": "Resource not found", "model": ErrorResponse}}
_INVALID = {400: {"description": "Validation error", "model": ValidationErrorResponse}}


def create_router(store: ResourceStore[int, RelationalResource]) -> APIRouter:
    """Build the /api/pg/resources route group around `store`."""
    router = APIRouter(prefix="/api/pg/resources", tags=["PostgreSQL Resources"])

    @router.get(
        "",
        response_model=List[RelationalResource],
        summary="List all resources",
    )
    async def list_resources() -> List[RelationalResource]:
        return await store.list()

    @router.get(
        "/{resource_id}",
        response_model=RelationalResource,
        responses={**_NOT_FOUND, **_INVALID},
        summary="Get a resource by id",
    )
    async def get_resource(
        resource_id: int = Path(le=MAX_RESOURCE_ID),
    ) -> RelationalResource:
        resource = await store.get_by_id(resource_id)
        if resource is None:
            raise NotFoundError(resource_id=str(resource_id))
        return resource

    @router.post(
        "",
        response_model=RelationalResource,
        status_code=status.HTTP_201_CREATED,
        responses=_INVALID,
        summary="Create a resource",
    )
    async def create_resource(body: ResourceCreate) -> RelationalResource:
        return await store.create(body)

    @router.put(
        "/{resource_id}",
        response_model=RelationalResource,
        responses={**_NOT_FOUND, **_INVALID},
        summary="Replace a resource's name and description",
    )
    async def update_resource(
        body: ResourceCreate,
        resource_id: int = Path(le=MAX_RESOURCE_ID),
    ) -> RelationalResource:
        resource = await store.update(resource_id, body)
        if resource is None:
            raise NotFoundError(resource_id=str(resource_id))
        return resource

    @router.delete(
        "/{resource_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        responses={**_NOT_FOUND, **_INVALID},
        summary="Delete a resource",
    )
    async def delete_resource(
        resource_id: int = Path(le=MAX_RESOURCE_ID),
    ) -> Response:
        if not await store.delete(resource_id):
            raise NotFoundError(resource_id=str(resource_id))
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router
