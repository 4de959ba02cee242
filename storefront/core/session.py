"""Shopper session management"""

import logging
import uuid
from datetime import datetime
from dataclasses import dataclass
from typing import Optional

from .config import settings
from ..database.carts import CartStorage, MemoryCartStorage, build_cart_storage, serialize_lines
from ..services.cart_store import CartStore

logger = logging.getLogger(__name__)


@dataclass
class ShopperSession:
    """Shopping session owning exactly one cart"""
    session_id: str
    created_at: datetime
    updated_at: datetime
    cart: CartStore

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()


class SessionManager:
    """Manages shopper sessions and the carts they own"""

    def __init__(self, storage: Optional[CartStorage] = None):
        self.storage = storage or MemoryCartStorage()
        self.sessions: dict[str, ShopperSession] = {}

    def _open(self, session_id: str) -> ShopperSession:
        now = datetime.utcnow()
        session = ShopperSession(
            session_id=session_id,
            created_at=now,
            updated_at=now,
            cart=CartStore.load(session_id, self.storage),
        )
        self.sessions[session_id] = session
        return session

    def create_session(self) -> ShopperSession:
        """Create a new session with an empty cart"""
        session_id = str(uuid.uuid4())
        self.storage.write(session_id, serialize_lines([]))
        return self._open(session_id)

    def get_session(self, session_id: str) -> Optional[ShopperSession]:
        """
        Get session by ID.

        A session known only to storage (e.g. after a restart) is restored
        from its persisted cart the first time it is requested.
        """
        session = self.sessions.get(session_id)
        if session:
            return session

        if self.storage.read(session_id) is None:
            return None

        logger.info(f"Restoring session {session_id} from storage")
        return self._open(session_id)

    def get_or_create_session(self, session_id: Optional[str] = None) -> ShopperSession:
        """Get existing session or create new one"""
        if session_id:
            session = self.get_session(session_id)
            if session:
                return session
        return self.create_session()

    def delete_session(self, session_id: str) -> bool:
        """Delete a session and its persisted cart"""
        existed = self.sessions.pop(session_id, None) is not None
        if self.storage.read(session_id) is not None:
            self.storage.delete(session_id)
            existed = True
        return existed

    def cleanup_old_sessions(self, max_age_hours: int = 24) -> int:
        """End sessions idle for longer than max_age_hours, dropping their carts"""
        now = datetime.utcnow()
        old_sessions = [
            sid for sid, session in self.sessions.items()
            if (now - session.updated_at).total_seconds() > max_age_hours * 3600
        ]
        for sid in old_sessions:
            del self.sessions[sid]
            self.storage.delete(sid)
        return len(old_sessions)


# Singleton instance
session_manager = SessionManager(build_cart_storage(settings))
