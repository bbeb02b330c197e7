"""
Document store connection management.

The client is created once at application startup (see `crudkit.main`) and
closed on shutdown. Nothing here is a module-level singleton: the factory
returns the client and the caller decides where it lives (app.state).

Timeouts are the driver's own (`serverSelectionTimeoutMS`, `socketTimeoutMS`);
this layer adds none of its own, so a slow or unreachable server surfaces as a
driver timeout which the mapper reports as DATABASE_UNAVAILABLE.
"""

import logging
from typing import Any

from pymongo import ASCENDING, AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from crudkit.config.settings import Settings
from crudkit.exceptions.mapper import store_error_boundary

logger = logging.getLogger(__name__)

# collection -> list of (keys, index options)
INDEXES: dict[str, list[tuple[list[tuple[str, int]], dict[str, Any]]]] = {
    "users": [([("email", ASCENDING)], {"unique": True, "name": "email_1"})],
    "products": [
        ([("sku", ASCENDING)], {"unique": True, "name": "sku_1"}),
        ([("category", ASCENDING)], {"name": "category_1"}),
    ],
}


def create_client(settings: Settings) -> AsyncMongoClient:
    """
    Build the async client. Connecting is lazy: no I/O happens until the
    first operation.
    """
    client: AsyncMongoClient = AsyncMongoClient(
        settings.MONGO_URI,
        serverSelectionTimeoutMS=settings.MONGO_SERVER_SELECTION_TIMEOUT_MS,
        socketTimeoutMS=settings.MONGO_SOCKET_TIMEOUT_MS,
        tz_aware=True,
        appname=settings.APP_NAME,
    )
    logger.info("db.client.created", extra={"database": settings.DATABASE_NAME})
    return client


def get_database(client: AsyncMongoClient, settings: Settings) -> AsyncDatabase:
    return client[settings.DATABASE_NAME]


async def ensure_indexes(database) -> None:
    """
    Create the unique/secondary indexes the entities rely on. Idempotent.
    """
    async with store_error_boundary("Database"):
        for collection_name, specs in INDEXES.items():
            collection = database[collection_name]
            for keys, options in specs:
                await collection.create_index(keys, **options)
    logger.info("db.indexes.ensured", extra={"collections": sorted(INDEXES)})


async def ping(database) -> bool:
    """
    Round-trip to the server. Failures surface as DATABASE_UNAVAILABLE.
    """
    async with store_error_boundary("Database"):
        await database.command("ping")
    return True
