"""
DualStore API - Relational Resource Store
==========================================

What:  ResourceStore implementation over the PostgreSQL `resources` table.
How:   Opens one AsyncSession per operation from the shared session factory
       and issues a single statement; writes are committed before returning.
Who:   Wired into the /api/pg/resources route group by the bootstrap.

Statements:
    list       SELECT id, name, description FROM resources
    get_by_id  SELECT ... WHERE id = :id
    create     INSERT INTO resources (name, description) VALUES (...) RETURNING id
    update     UPDATE resources SET name = :n, description = :d WHERE id = :id RETURNING *
    delete     DELETE FROM resources WHERE id = :id

Zero affected rows on update/delete is reported as a miss (None / False),
even when the row exists but the values were unchanged by the write; there
is no "found but unchanged" outcome.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dualstore.exceptions import BackendError
from dualstore.models.resource import Resource
from dualstore.schemas.resource import RelationalResource, ResourceCreate
from dualstore.stores.base import ResourceStore

logger = logging.getLogger(__name__)


def _to_resource(row: Resource) -> RelationalResource:
    return RelationalResource(
        id=row.id,
        name=row.name,
        description=row.description if row.description is not None else "",
    )


class PostgresResourceStore(ResourceStore[int, RelationalResource]):
    """
    Relational adapter. Integer ids come from the table's sequence.

    Error Handling:
        Every SQLAlchemyError (connection refused, query failure, pool
        timeout) is logged and re-raised as BackendError, hiding the driver
        details from the API layer.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def list(self) -> List[RelationalResource]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(Resource))
                return [_to_resource(row) for row in result.scalars().all()]
        except (SQLAlchemyError, OSError) as e:
            raise self._backend_error("list", e) from e

    async def get_by_id(self, resource_id: int) -> Optional[RelationalResource]:
        try:
            async with self._session_factory() as session:
                row = await session.get(Resource, resource_id)
                return _to_resource(row) if row is not None else None
        except (SQLAlchemyError, OSError) as e:
            raise self._backend_error("get_by_id", e, resource_id) from e

    async def create(self, data: ResourceCreate) -> RelationalResource:
        try:
            async with self._session_factory() as session:
                row = Resource(name=data.name, description=data.description)
                session.add(row)
                await session.commit()
                logger.info("Created relational resource %s", row.id)
                return _to_resource(row)
        except (SQLAlchemyError, OSError) as e:
            raise self._backend_error("create", e) from e

    async def update(
        self, resource_id: int, data: ResourceCreate
    ) -> Optional[RelationalResource]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    update(Resource)
                    .where(Resource.id == resource_id)
                    .values(name=data.name, description=data.description)
                    .returning(Resource.id, Resource.name, Resource.description)
                )
                row = result.one_or_none()
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            raise self._backend_error("update", e, resource_id) from e

        return _to_resource(row) if row is not None else None

    async def delete(self, resource_id: int) -> bool:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    delete(Resource).where(Resource.id == resource_id)
                )
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            raise self._backend_error("delete", e, resource_id) from e

        deleted = result.rowcount == 1
        if deleted:
            logger.info("Deleted relational resource %s", resource_id)
        return deleted

    async def ping(self) -> bool:
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning("PostgreSQL ping failed: %s", str(e))
            return False

    @staticmethod
    def _backend_error(
        operation: str, error: Exception, resource_id: Optional[int] = None
    ) -> BackendError:
        logger.error(
            "PostgreSQL %s failed: %s", operation, str(error), exc_info=True
        )
        context = {"backend": "postgres", "operation": operation, "error_type": type(error).__name__}
        if resource_id is not None:
            context["resource_id"] = resource_id
        return BackendError(context=context)
