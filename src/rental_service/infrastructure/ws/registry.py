"""Process-wide table of live chat connections, one per user."""
from __future__ import annotations

import logging
import threading
from typing import Any, Protocol
from uuid import UUID

from rental_service.infrastructure.ws.protocol import WsOutbound

logger = logging.getLogger(__name__)


class Connection(Protocol):
    async def send_text(self, data: str) -> None: ...


class ConnectionRegistry:
    """Maps a user id to its single active connection (last registration wins).

    All reads and writes go through one lock that is never held across an
    await, so the table stays consistent for event-loop tasks and threads alike.
    A secondary handle→user index makes ``unregister`` O(1) and lets a stale
    disconnect be recognised: only the handle currently mapped for a user can
    remove that user's entry.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_user: dict[UUID, Connection] = {}
        self._by_handle: dict[int, UUID] = {}

    def register(self, user_id: UUID, handle: Connection) -> Connection | None:
        """Map user_id to handle and return the handle it replaced, if any."""
        with self._lock:
            previous_user = self._by_handle.get(id(handle))
            if previous_user is not None and previous_user != user_id:
                if self._by_user.get(previous_user) is handle:
                    del self._by_user[previous_user]

            replaced = self._by_user.get(user_id)
            if replaced is not None and replaced is not handle:
                self._by_handle.pop(id(replaced), None)

            self._by_user[user_id] = handle
            self._by_handle[id(handle)] = user_id

        logger.debug("WS registered: user=%s (total=%d)", user_id, len(self))
        return replaced if replaced is not handle else None

    def lookup(self, user_id: UUID) -> Connection | None:
        with self._lock:
            return self._by_user.get(user_id)

    def unregister(self, handle: Connection) -> UUID | None:
        """Drop the mapping owned by handle; a no-op for unknown or stale handles."""
        with self._lock:
            user_id = self._by_handle.pop(id(handle), None)
            if user_id is None:
                return None
            if self._by_user.get(user_id) is handle:
                del self._by_user[user_id]
        logger.debug("WS unregistered: user=%s", user_id)
        return user_id

    def clear(self) -> None:
        with self._lock:
            self._by_user.clear()
            self._by_handle.clear()

    def __len__(self) -> int:
        return len(self._by_user)

    def __contains__(self, user_id: object) -> bool:
        with self._lock:
            return user_id in self._by_user

    async def send(self, user_id: UUID, event_type: str, data: Any) -> bool:
        """Push an event to the user's live connection.

        Returns False when the user has no connection or the send fails; a
        broken connection is unregistered.
        """
        handle = self.lookup(user_id)
        if handle is None:
            return False
        return await send_event(handle, event_type, data, registry=self)


async def send_event(
    handle: Connection,
    event_type: str,
    data: Any,
    *,
    registry: ConnectionRegistry | None = None,
) -> bool:
    raw = WsOutbound(type=event_type, data=data).model_dump_json()
    try:
        await handle.send_text(raw)
    except Exception:
        logger.debug("WS send of %s failed", event_type, exc_info=True)
        if registry is not None:
            registry.unregister(handle)
        return False
    return True
