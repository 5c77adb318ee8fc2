"""
app/services/user_service.py

Purpose: Durable user record storage

- Fetch a user's record by Telegram id
- Create a minimal record for a new identity
- Save the full record (last write wins)
- In-memory implementation for development and tests
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional

from pymongo.errors import DuplicateKeyError, PyMongoError

from app.core.exceptions import StoreError
from app.core.logging import get_logger, LogContext
from app.db.mongo import get_users_collection
from app.models.user import UserRecord

logger = get_logger(__name__)


class RecordStore(ABC):
    """
    Store of UserRecord documents keyed by user id.
    Every write either succeeds or raises StoreError.
    """

    @abstractmethod
    async def get(self, user_id: int) -> Optional[UserRecord]:
        """Get a record, or None for an unknown identity."""

    @abstractmethod
    async def create(self, user_id: int, seed: Optional[Dict[str, Any]] = None) -> UserRecord:
        """Create a minimal record; returns the existing one if it was created concurrently."""

    @abstractmethod
    async def save(self, record: UserRecord) -> UserRecord:
        """Persist the full record."""


class MongoRecordStore(RecordStore):
    """
    Users collection backed store.
    """

    async def get(self, user_id: int) -> Optional[UserRecord]:
        try:
            document = await get_users_collection().find_one({"user_id": user_id})
        except PyMongoError as e:
            raise StoreError("Failed to load user record", details={"user_id": user_id}) from e

        if not document:
            return None
        return UserRecord.from_document(document)

    async def create(self, user_id: int, seed: Optional[Dict[str, Any]] = None) -> UserRecord:
        with LogContext(user_id=user_id):
            record = UserRecord(user_id=user_id, **(seed or {}))
            users = get_users_collection()

            try:
                await users.insert_one(record.to_document())
                logger.info("New user created")
                return record

            except DuplicateKeyError:
                # Created by another request in the meantime
                logger.warning("User already exists, loading it")
                existing = await self.get(user_id)
                if existing is None:
                    raise StoreError("User vanished after duplicate insert", details={"user_id": user_id})
                return existing

            except PyMongoError as e:
                raise StoreError("Failed to create user record", details={"user_id": user_id}) from e

    async def save(self, record: UserRecord) -> UserRecord:
        record = record.model_copy(update={"updated_at": datetime.utcnow()})

        try:
            await get_users_collection().replace_one(
                {"user_id": record.user_id},
                record.to_document(),
                upsert=True
            )
        except PyMongoError as e:
            raise StoreError("Failed to save user record", details={"user_id": record.user_id}) from e

        logger.debug("User record saved")
        return record


class InMemoryRecordStore(RecordStore):
    """
    Dict-backed store for development and tests. Not suitable for production use.
    """

    def __init__(self):
        self._records: Dict[int, Dict[str, Any]] = {}

    async def get(self, user_id: int) -> Optional[UserRecord]:
        document = self._records.get(user_id)
        if document is None:
            return None
        return UserRecord.from_document(document)

    async def create(self, user_id: int, seed: Optional[Dict[str, Any]] = None) -> UserRecord:
        existing = await self.get(user_id)
        if existing is not None:
            return existing
        record = UserRecord(user_id=user_id, **(seed or {}))
        self._records[user_id] = record.to_document()
        return record

    async def save(self, record: UserRecord) -> UserRecord:
        record = record.model_copy(update={"updated_at": datetime.utcnow()})
        self._records[record.user_id] = record.to_document()
        return record
