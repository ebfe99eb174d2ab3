import threading
from typing import Any, Dict, Optional, Protocol

from logger.logger import get_logger

logger = get_logger("realtime")


class ConnectionHandle(Protocol):
    """Anything the gateway can push a JSON frame to, e.g. a FastAPI WebSocket"""

    async def send_json(self, data: Any) -> None:
        ...


class ConnectionRegistry:
    """
    Process-local map of user id -> live connection.

    At most one handle per user; a later join replaces the earlier one.
    Each operation is atomic under an internal lock, so handlers running on
    other threads (or interleaved tasks) never observe a half-updated map.
    Nothing here is persisted.
    """

    def __init__(self) -> None:
        self._connections: Dict[str, ConnectionHandle] = {}
        self._lock = threading.Lock()

    def register(self, user_id: str, handle: ConnectionHandle) -> None:
        with self._lock:
            replaced = self._connections.get(user_id)
            self._connections[user_id] = handle
        if replaced is not None and replaced is not handle:
            logger.info(f"Live connection for user {user_id} replaced by a newer one")
        else:
            logger.info(f"User {user_id} joined live delivery")

    def unregister(self, user_id: str, handle: Optional[ConnectionHandle] = None) -> bool:
        """
        Drop the user's registration.

        When ``handle`` is given, the entry is removed only if it is still that
        handle, so a stale connection closing cannot evict its replacement.
        """
        with self._lock:
            current = self._connections.get(user_id)
            if current is None or (handle is not None and current is not handle):
                return False
            del self._connections[user_id]
        logger.info(f"User {user_id} left live delivery")
        return True

    def lookup(self, user_id: str) -> Optional[ConnectionHandle]:
        with self._lock:
            return self._connections.get(user_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)

    def clear(self) -> None:
        with self._lock:
            self._connections.clear()
