# Stores package init
"""
DualStore API - Resource Store Adapters
========================================

What:  Persistence adapters implementing one abstract ResourceStore contract.

Store Inventory:
    - ResourceStore (abstract):  list / get_by_id / create / update / delete / ping
    - PostgresResourceStore:     integer ids, SQLAlchemy async + asyncpg
    - MongoResourceStore:        ObjectId hex ids, pymongo async

The bootstrap picks one adapter per route group and passes it in when the
group is built; route handlers never look a store up on the app object.
"""
