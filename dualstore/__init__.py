"""
DualStore API - Application Package Initializer
================================================

What: A CRUD HTTP API exposing the same "resource" entity from two
      interchangeable backends: PostgreSQL under /api/pg and MongoDB under
      /api/mongo.

Architecture Note:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Stores (ResourceStore adapters) │  ← one per backend
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   database.py / mongo.py (Clients)  │  ← engine + Mongo client lifecycle
    └─────────────────────────────────────┘

    The two backends share nothing: an id from one is never valid in the other.
"""

__version__ = "1.0.0"
