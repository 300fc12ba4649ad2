"""
DualStore API - Document Store Connection Management
=====================================================

What:  Factory and lifecycle helpers for the shared MongoDB client.
How:   One pymongo AsyncMongoClient per application. The client connects
       lazily; `ping()` forces a round trip during startup so an
       unreachable server aborts the process instead of failing requests.
Who:   Used by the bootstrap in main.py.
"""

import logging

from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection

from dualstore.config import Settings

logger = logging.getLogger(__name__)


def create_client(app_settings: Settings) -> AsyncMongoClient:
    """Build the shared client from MONGO_* settings. Does not connect."""
    credentials = {}
    if app_settings.mongo_user:
        credentials["username"] = app_settings.mongo_user
        credentials["password"] = app_settings.mongo_password
    return AsyncMongoClient(app_settings.mongo_url, **credentials)


def get_collection(client: AsyncMongoClient, app_settings: Settings) -> AsyncCollection:
    """The collection holding resource documents."""
    return client[app_settings.mongo_db][app_settings.mongo_collection]


async def ping(client: AsyncMongoClient) -> None:
    """Round trip to the server; raises a PyMongoError when unreachable."""
    await client.admin.command("ping")
    logger.info("MongoDB reachable")


async def close_client(client: AsyncMongoClient) -> None:
    """Close all pooled connections. Called during application shutdown."""
    await client.close()
    logger.info("MongoDB client closed")
