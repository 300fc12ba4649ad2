"""
DualStore API - Abstract Resource Store Interface
==================================================

What:  Abstract base class defining the capability set every backend adapter
       offers: list, get_by_id, create, update, delete (plus ping for health).
How:   Concrete adapters inherit from ResourceStore, parameterized by the
       identifier type they accept and the resource model they return.
Who:   Route handlers, which receive their adapter explicitly when the route
       group is built (see routes/pg_resources.py, routes/mongo_resources.py).

Implementations:
    - PostgresResourceStore: ResourceStore[int, RelationalResource]
    - MongoResourceStore:    ResourceStore[str, DocumentResource]

Outcome contract (shared by both adapters):
    success        → the resource / list / True
    miss           → None (get_by_id, update) or False (delete); never raises
    backend fault  → BackendError
The document adapter adds one more: InvalidIdentifierError for ids that are
not in its identifier format.
"""

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

from dualstore.schemas.resource import ResourceCreate

IdT = TypeVar("IdT")
ResourceT = TypeVar("ResourceT")


class ResourceStore(ABC, Generic[IdT, ResourceT]):
    """
    Persistence contract for resources in one backend.

    Each method is a single round trip to the backend. Implementations hold
    no per-request state and never retry.
    """

    @abstractmethod
    async def list(self) -> List[ResourceT]:
        """All resources in storage order. Empty list when there are none."""
        ...

    @abstractmethod
    async def get_by_id(self, resource_id: IdT) -> Optional[ResourceT]:
        """The matching resource, or None."""
        ...

    @abstractmethod
    async def create(self, data: ResourceCreate) -> ResourceT:
        """Persist a new resource; the backend assigns its id."""
        ...

    @abstractmethod
    async def update(self, resource_id: IdT, data: ResourceCreate) -> Optional[ResourceT]:
        """
        Replace name and description of the matching resource.

        Returns the post-update resource, or None when nothing matched
        (no record is ever created by an update).
        """
        ...

    @abstractmethod
    async def delete(self, resource_id: IdT) -> bool:
        """Remove the matching resource. False when nothing was removed."""
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """
        Lightweight connectivity check used by GET /health.

        Returns: True if the backend answered, False otherwise. Never raises.
        """
        ...
