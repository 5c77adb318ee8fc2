"""
app/db/mongo.py

Purpose: MongoDB connection lifecycle

- One Motor client per process, created at startup
- Connect retries with exponential backoff
- Collection accessors for users, orders and sessions
- Ping-based health check for the probes
"""

import asyncio
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, PyMongoError, ServerSelectionTimeoutError

from app.core.config import settings
from app.core.exceptions import StoreError
from app.core.logging import get_logger

logger = get_logger(__name__)

_client: Optional[AsyncIOMotorClient] = None
_database: Optional[AsyncIOMotorDatabase] = None

# users: durable UserRecord documents keyed by Telegram user id
USERS_COLLECTION = "users"
# orders: client orders, unique on idempotency_key
ORDERS_COLLECTION = "orders"
# sessions: dialogue position and accumulator, removed by a TTL index on expires_at
SESSIONS_COLLECTION = "sessions"

CONNECT_ATTEMPTS = 3
FIRST_RETRY_DELAY = 2


def _new_client() -> AsyncIOMotorClient:
    return AsyncIOMotorClient(
        settings.MONGODB_URL,
        maxPoolSize=50,
        minPoolSize=5,
        serverSelectionTimeoutMS=5000,
        connectTimeoutMS=10000,
        retryWrites=True,
        retryReads=True,
    )


async def connect_to_mongo():
    """
    Opens the client and verifies it with a ping.

    Raises:
        ConnectionError: MongoDB stayed unreachable after every attempt
    """
    global _client, _database

    if _client is not None:
        logger.warning("MongoDB client already initialized")
        return

    delay = FIRST_RETRY_DELAY
    for attempt in range(1, CONNECT_ATTEMPTS + 1):
        client = _new_client()
        try:
            logger.info(f"Connecting to MongoDB (attempt {attempt}/{CONNECT_ATTEMPTS})")
            await client.admin.command("ping")
        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            client.close()
            logger.error(f"MongoDB unreachable: {e}")
            if attempt == CONNECT_ATTEMPTS:
                logger.critical("Giving up on MongoDB")
                raise ConnectionError("Could not establish MongoDB connection") from e
            logger.info(f"Retrying in {delay} seconds...")
            await asyncio.sleep(delay)
            delay *= 2
            continue

        _client = client
        _database = client[settings.MONGODB_DB_NAME]
        logger.info(f"✅ Connected to MongoDB database '{settings.MONGODB_DB_NAME}'")
        return


async def close_mongo_connection():
    global _client, _database

    if _client is None:
        return

    _client.close()
    _client = None
    _database = None
    logger.info("MongoDB connection closed")


async def check_database_health() -> bool:
    """
    Returns True if the server answers a ping. Never raises.
    """
    if _client is None:
        logger.warning("Health check before MongoDB was connected")
        return False

    try:
        await _client.admin.command("ping")
    except PyMongoError as e:
        logger.error(f"Database health check failed: {e}")
        return False
    return True


def get_database() -> AsyncIOMotorDatabase:
    """
    Raises:
        StoreError: connect_to_mongo() has not run
    """
    if _database is None:
        raise StoreError("Database not initialized, call connect_to_mongo() during startup")
    return _database


def get_users_collection() -> AsyncIOMotorCollection:
    return get_database()[USERS_COLLECTION]


def get_orders_collection() -> AsyncIOMotorCollection:
    return get_database()[ORDERS_COLLECTION]


def get_sessions_collection() -> AsyncIOMotorCollection:
    return get_database()[SESSIONS_COLLECTION]
