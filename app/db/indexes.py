"""
app/db/indexes.py

Purpose: Database index management

- Index definitions per collection
- Unique keys: users.user_id, orders.order_id, orders.idempotency_key, sessions.user_id
- TTL index that removes expired dialogue sessions
- Idempotent: safe to run on every startup

Run directly to create indexes manually:
    python -m app.db.indexes
"""

from typing import Dict, List

from pymongo import ASCENDING, DESCENDING, IndexModel

from app.core.logging import get_logger
from app.db.mongo import (
    ORDERS_COLLECTION,
    SESSIONS_COLLECTION,
    USERS_COLLECTION,
    get_database,
)

logger = get_logger(__name__)


INDEXES: Dict[str, List[IndexModel]] = {
    USERS_COLLECTION: [
        IndexModel([("user_id", ASCENDING)], unique=True, name="user_id_unique"),
        IndexModel([("profile.role", ASCENDING)], name="role_idx"),
        IndexModel([("registration_completed", ASCENDING)], name="registration_completed_idx"),
        IndexModel([("driver_info.current_location", ASCENDING)], name="driver_location_idx"),
    ],
    ORDERS_COLLECTION: [
        IndexModel([("order_id", ASCENDING)], unique=True, name="order_id_unique"),
        # One first order per user, however often the final message is redelivered
        IndexModel([("idempotency_key", ASCENDING)], unique=True, sparse=True, name="order_idempotency_unique"),
        IndexModel([("status", ASCENDING), ("created_at", DESCENDING)], name="status_created_idx"),
        IndexModel([("client_id", ASCENDING)], name="client_idx"),
        IndexModel([("cargo.from_location", ASCENDING)], name="cargo_from_idx"),
    ],
    SESSIONS_COLLECTION: [
        IndexModel([("user_id", ASCENDING)], unique=True, name="session_user_unique"),
        # Mongo deletes the document once expires_at has passed
        IndexModel([("expires_at", ASCENDING)], expireAfterSeconds=0, name="session_expiry_ttl_idx"),
    ],
}


async def create_indexes():
    """
    Creates every index in INDEXES.

    Raises:
        PyMongoError: An index could not be created (e.g. existing duplicates)
    """
    database = get_database()

    for collection_name, models in INDEXES.items():
        try:
            names = await database[collection_name].create_indexes(models)
        except Exception as e:
            logger.error(f"Failed to create indexes on {collection_name}: {e}", exc_info=True)
            raise
        logger.debug(f"{collection_name}: {', '.join(names)}")

    logger.info(f"✅ Indexes ready on {', '.join(INDEXES)}")


if __name__ == "__main__":
    import asyncio
    from app.db.mongo import connect_to_mongo, close_mongo_connection

    async def main():
        await connect_to_mongo()
        try:
            await create_indexes()
        finally:
            await close_mongo_connection()

    asyncio.run(main())
