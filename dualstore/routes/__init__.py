# Routes package init
"""
DualStore API - API Routes Package
===================================

What:  HTTP route groups. Each module exposes create_router(), which takes
       the store adapter(s) the group works with.

Route Inventory:
    - pg_resources.py:     /api/pg/resources[/{id}]     (relational backend)
    - mongo_resources.py:  /api/mongo/resources[/{id}]  (document backend)
    - health.py:           GET /health                  (both backends)

Routes stay thin: extract path/body, call the store, pick the status code.
Error bodies are produced by the exception handlers in main.py.
"""
