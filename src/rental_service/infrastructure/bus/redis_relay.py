"""Redis Pub/Sub relay for chat pushes whose receiver lives on another worker."""
from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any
from uuid import UUID

import redis.asyncio as aioredis

from rental_service.infrastructure.bus.serializer import (
    RelayFrame,
    deserialize_frame,
    serialize_frame,
)
from rental_service.infrastructure.ws.registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class RedisChatRelay:
    """Publishes pushes for receivers absent locally; delivers frames from peers.

    Delivery stays best-effort: a frame nobody can deliver is dropped and the
    receiver picks the message up from history.
    """

    def __init__(
        self,
        redis: aioredis.Redis,
        channel: str,
        registry: ConnectionRegistry,
    ) -> None:
        self._redis = redis
        self._channel = channel
        self._registry = registry
        self._origin = uuid.uuid4().hex
        self._task: asyncio.Task[None] | None = None

    async def publish(self, receiver_id: UUID, event_type: str, data: Any) -> None:
        frame = RelayFrame(origin=self._origin, receiver_id=receiver_id, event=event_type, data=data)
        await self._redis.publish(self._channel, serialize_frame(frame))

    async def start(self) -> None:
        self._task = asyncio.create_task(self._listen(), name="redis-chat-relay")
        logger.info("Chat relay started on channel=%s origin=%s", self._channel, self._origin)

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            except Exception:
                logger.exception("Chat relay exited with an error")
            logger.info("Chat relay stopped")

    async def deliver(self, raw: str | bytes) -> bool:
        frame = deserialize_frame(raw)
        if frame.origin == self._origin:
            return False
        return await self._registry.send(frame.receiver_id, frame.event, frame.data)

    async def _listen(self) -> None:
        pubsub = self._redis.pubsub()
        await pubsub.subscribe(self._channel)
        try:
            async for message in pubsub.listen():
                if message["type"] != "message":
                    continue
                try:
                    await self.deliver(message["data"])
                except Exception:
                    logger.exception("Error processing relay frame")
        finally:
            await pubsub.unsubscribe(self._channel)
            await pubsub.aclose()
