"""
app/services/session_service.py

Purpose: Ephemeral dialogue session storage

- get / set / update_field / delete of a user's SessionState
- Entries expire after SESSION_TTL_SECONDS (Mongo TTL index on expires_at)
- Undecodable or expired entries read as absent
- In-memory implementation for development and tests
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import PyMongoError

from app.core.config import settings
from app.core.exceptions import StoreError
from app.core.logging import get_logger
from app.db.mongo import get_sessions_collection
from app.models.session import SessionState

logger = get_logger(__name__)

# Fields update_field may touch
SESSION_FIELDS = ("current_state", "current_step", "data")


class SessionStore(ABC):
    """
    Key-value store of SessionState keyed by user id, with TTL expiry.
    Every write either succeeds or raises StoreError.
    """

    @abstractmethod
    async def get(self, user_id: int) -> Optional[SessionState]:
        """Get a live session, or None if absent or expired."""

    @abstractmethod
    async def set(self, user_id: int, session: SessionState) -> None:
        """Replace the session and restart its TTL."""

    @abstractmethod
    async def update_field(self, user_id: int, field: str, value: Any) -> None:
        """Update one field of an existing session."""

    @abstractmethod
    async def delete(self, user_id: int) -> None:
        """Delete the session if present."""


def _check_field(field: str):
    if field not in SESSION_FIELDS:
        raise ValueError(f"Unknown session field: {field}")


def _decode(user_id: int, document: Dict[str, Any]) -> Optional[SessionState]:
    try:
        return SessionState.from_document(document)
    except (PydanticValidationError, KeyError) as e:
        logger.warning(f"Discarding undecodable session: {e}")
        return None


class MongoSessionStore(SessionStore):
    """
    Sessions collection backed store.
    Mongo's TTL monitor removes expired documents lazily, so reads also check expires_at.
    """

    def __init__(self, ttl_seconds: Optional[int] = None):
        self.ttl_seconds = ttl_seconds or settings.SESSION_TTL_SECONDS

    def _expires_at(self) -> datetime:
        return datetime.utcnow() + timedelta(seconds=self.ttl_seconds)

    async def get(self, user_id: int) -> Optional[SessionState]:
        try:
            document = await get_sessions_collection().find_one(
                {"user_id": user_id, "expires_at": {"$gt": datetime.utcnow()}}
            )
        except PyMongoError as e:
            raise StoreError("Failed to load session", details={"user_id": user_id}) from e

        if not document:
            return None
        return _decode(user_id, document)

    async def set(self, user_id: int, session: SessionState) -> None:
        document = session.to_document()
        document["user_id"] = user_id
        document["expires_at"] = self._expires_at()
        document["updated_at"] = datetime.utcnow()

        try:
            await get_sessions_collection().replace_one(
                {"user_id": user_id},
                document,
                upsert=True
            )
        except PyMongoError as e:
            raise StoreError("Failed to save session", details={"user_id": user_id}) from e

        logger.debug(f"Session saved: {session.position}")

    async def update_field(self, user_id: int, field: str, value: Any) -> None:
        _check_field(field)
        if hasattr(value, "value"):
            value = value.value

        try:
            result = await get_sessions_collection().update_one(
                {"user_id": user_id},
                {
                    "$set": {
                        field: value,
                        "expires_at": self._expires_at(),
                        "updated_at": datetime.utcnow()
                    }
                }
            )
        except PyMongoError as e:
            raise StoreError("Failed to update session", details={"user_id": user_id, "field": field}) from e

        if result.matched_count == 0:
            raise StoreError("Session to update does not exist", details={"user_id": user_id, "field": field})

    async def delete(self, user_id: int) -> None:
        try:
            await get_sessions_collection().delete_one({"user_id": user_id})
        except PyMongoError as e:
            raise StoreError("Failed to delete session", details={"user_id": user_id}) from e

        logger.debug("Session deleted")


class InMemorySessionStore(SessionStore):
    """
    Dict-backed store for development and tests. Not suitable for production use.
    """

    def __init__(self, ttl_seconds: Optional[int] = None):
        self.ttl_seconds = ttl_seconds or settings.SESSION_TTL_SECONDS
        self._sessions: Dict[int, Dict[str, Any]] = {}

    async def get(self, user_id: int) -> Optional[SessionState]:
        document = self._sessions.get(user_id)
        if document is None:
            return None
        if document["expires_at"] <= datetime.utcnow():
            del self._sessions[user_id]
            return None
        return _decode(user_id, document)

    async def set(self, user_id: int, session: SessionState) -> None:
        document = session.to_document()
        document["user_id"] = user_id
        document["expires_at"] = datetime.utcnow() + timedelta(seconds=self.ttl_seconds)
        self._sessions[user_id] = document

    async def update_field(self, user_id: int, field: str, value: Any) -> None:
        _check_field(field)
        if user_id not in self._sessions:
            raise StoreError("Session to update does not exist", details={"user_id": user_id, "field": field})
        if hasattr(value, "value"):
            value = value.value
        self._sessions[user_id][field] = value
        self._sessions[user_id]["expires_at"] = datetime.utcnow() + timedelta(seconds=self.ttl_seconds)

    async def delete(self, user_id: int) -> None:
        self._sessions.pop(user_id, None)

    def expire(self, user_id: int) -> None:
        """Marks a session as past its TTL."""
        if user_id in self._sessions:
            self._sessions[user_id]["expires_at"] = datetime.utcnow() - timedelta(seconds=1)
