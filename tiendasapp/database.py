"""
Tiendas Backend — MongoDB Connection Management
=================================================

What:  Async MongoDB client, collection accessor, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   One AsyncMongoClient (with its own connection pool) per process,
       created on first use or at startup, closed at shutdown.
Who:   Route handlers receive the stores collection via Depends().
When:  Client created at startup; collection handed out per request.

Architecture Decision:
    The client is process-wide, but nothing outside this module touches it
    directly. Routes ask for the collection through `get_stores_collection`,
    so tests swap in an in-memory collection with app.dependency_overrides.

Connection Pooling:
    The driver keeps a pool per server (maxPoolSize defaults to 100) and is
    safe to share between concurrent requests.
"""

import logging
from typing import Optional

from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection

from tiendasapp.config import settings

logger = logging.getLogger(__name__)

_client: Optional[AsyncMongoClient] = None


def get_client() -> AsyncMongoClient:
    """Return the shared client, creating it on first use."""
    global _client
    if _client is None:
        _client = AsyncMongoClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=settings.mongodb_server_selection_timeout_ms,
            tz_aware=True,
        )
    return _client


def get_stores_collection() -> AsyncCollection:
    """
    FastAPI dependency that provides the stores collection.

    The database is the one named in MONGODB_URI, falling back to
    settings.mongodb_database when the URI does not name one.
    """
    database = get_client().get_default_database(default=settings.mongodb_database)
    return database[settings.mongodb_collection]


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def connect() -> bool:
    """
    What:  Creates the client and checks the server answers a ping.
    When:  Called once during application startup (lifespan handler).
    Returns: True if the server answered, False otherwise.

    A failed ping is logged but not fatal: requests that need the database
    will fail with a 500 until it becomes reachable.
    """
    client = get_client()
    try:
        await client.admin.command("ping")
    except Exception as e:
        logger.error("Could not connect to MongoDB: %s", str(e))
        return False
    logger.info("Connected to MongoDB")
    return True


async def close_client() -> None:
    """
    What:  Closes all pooled connections.
    When:  Called during application shutdown (lifespan handler).
    """
    global _client
    if _client is not None:
        await _client.close()
        _client = None
