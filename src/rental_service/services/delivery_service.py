"""Chat event routing for one live connection.

Every inbound event is handled to completion and answered on the same
connection: a send_message always yields message_sent or message_error, a
get_messages always yields messages_history or messages_error. Failures are
reported to the requester only and never close the connection.
"""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable
from uuid import UUID

from pydantic import ValidationError as PayloadError

from rental_service.application.dto.message import MessageView, SendMessageDTO
from rental_service.application.dto.principal import Principal
from rental_service.application.exceptions import AppError, ForbiddenError
from rental_service.application.ports.bus import ChatRelay
from rental_service.application.ports.clock import Clock, UtcClock
from rental_service.application.uow import UoWFactory
from rental_service.infrastructure.ws.protocol import (
    GetMessagesPayload,
    InboundKind,
    OutboundKind,
    SendMessagePayload,
    UserConnectedPayload,
    WsInbound,
    message_payload,
)
from rental_service.infrastructure.ws.registry import Connection, ConnectionRegistry, send_event
from rental_service.services import message_service
from rental_service.services.history_service import HistoryLoader

logger = logging.getLogger(__name__)

Handler = Callable[[Connection, Principal, Any], Awaitable[None]]

SEND_FAILED = "Failed to send message"
LOAD_FAILED = "Failed to load messages"


class DeliveryCoordinator:
    def __init__(
        self,
        registry: ConnectionRegistry,
        uow_factory: UoWFactory,
        *,
        relay: ChatRelay | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._registry = registry
        self._uow_factory = uow_factory
        self._relay = relay
        self._clock = clock or UtcClock()
        self._history = HistoryLoader(uow_factory)
        self._handlers: dict[InboundKind, Handler] = {
            InboundKind.USER_CONNECTED: self._on_user_connected,
            InboundKind.SEND_MESSAGE: self._on_send_message,
            InboundKind.GET_MESSAGES: self._on_get_messages,
            InboundKind.PING: self._on_ping,
        }
        unhandled = set(InboundKind) - self._handlers.keys()
        if unhandled:
            raise RuntimeError(f"No handler for inbound events: {sorted(unhandled)}")

    async def dispatch(self, conn: Connection, principal: Principal, raw: str) -> None:
        try:
            envelope = WsInbound.model_validate_json(raw)
        except PayloadError:
            await send_event(conn, OutboundKind.ERROR, {"code": "invalid_payload"})
            return

        try:
            kind = InboundKind(envelope.type)
        except ValueError:
            await send_event(
                conn, OutboundKind.ERROR, {"code": "unknown_type", "type": envelope.type},
            )
            return

        await self._handlers[kind](conn, principal, envelope.data)

    def disconnect(self, conn: Connection) -> None:
        user_id = self._registry.unregister(conn)
        if user_id is not None:
            logger.info("User %s disconnected", user_id)

    async def _on_user_connected(self, conn: Connection, principal: Principal, data: Any) -> None:
        try:
            payload = UserConnectedPayload.parse(data)
        except PayloadError as exc:
            await send_event(
                conn, OutboundKind.ERROR, {"code": "invalid_data", "detail": str(exc)},
            )
            return

        if payload.user_id != principal.user_id:
            await send_event(
                conn,
                OutboundKind.ERROR,
                {"code": "identity_mismatch", "detail": "userId does not match token"},
            )
            return

        replaced = self._registry.register(principal.user_id, conn)
        if replaced is not None:
            logger.info("User %s reconnected, previous connection superseded", principal.user_id)
        else:
            logger.info("User %s connected", principal.user_id)

    async def _on_send_message(self, conn: Connection, principal: Principal, data: Any) -> None:
        try:
            request = SendMessagePayload.model_validate(data)
        except PayloadError:
            await self._message_error(conn, "Invalid message payload", data)
            return

        try:
            if request.sender_id != principal.user_id:
                raise ForbiddenError("senderId does not match the authenticated user")
            view = await self._store(request)
        except AppError as exc:
            await self._message_error(conn, exc.detail, data)
            return
        except Exception:
            logger.exception("send_message failed for user %s", principal.user_id)
            await self._message_error(conn, SEND_FAILED, data)
            return

        payload = await self._push(view.receiver.id, message_payload(view))
        if payload["delivered"]:
            await self._mark_delivered(view.id)
        await send_event(conn, OutboundKind.MESSAGE_SENT, payload)

    async def _on_get_messages(self, conn: Connection, principal: Principal, data: Any) -> None:
        try:
            request = GetMessagesPayload.model_validate(data)
        except PayloadError:
            await send_event(conn, OutboundKind.MESSAGES_ERROR, {"error": "Invalid history request"})
            return

        try:
            history = await self._history.load(principal, request)
        except AppError as exc:
            await send_event(conn, OutboundKind.MESSAGES_ERROR, {"error": exc.detail})
            return
        except Exception:
            logger.exception("get_messages failed for user %s", principal.user_id)
            await send_event(conn, OutboundKind.MESSAGES_ERROR, {"error": LOAD_FAILED})
            return

        await send_event(conn, OutboundKind.MESSAGES_HISTORY, history)

    async def _on_ping(self, conn: Connection, principal: Principal, data: Any) -> None:
        await send_event(conn, OutboundKind.PONG, {})

    async def _store(self, request: SendMessagePayload) -> MessageView:
        dto = SendMessageDTO(
            property_id=request.property_id,
            sender_id=request.sender_id,
            receiver_id=request.receiver_id,
            body=request.message,
        )
        async with self._uow_factory() as uow:
            return await message_service.append_message_view(dto, uow, self._clock)

    async def _push(self, receiver_id: UUID, payload: dict[str, Any]) -> dict[str, Any]:
        """Best-effort live push; returns the record as the receiver got it.

        A failed send counts the same as an offline receiver, and the stored
        record goes out unchanged.
        """
        live = {**payload, "delivered": True}
        if await self._registry.send(receiver_id, OutboundKind.NEW_MESSAGE, live):
            return live
        if self._relay is not None:
            try:
                await self._relay.publish(receiver_id, OutboundKind.NEW_MESSAGE, payload)
            except Exception:
                logger.warning("Relay publish for %s failed", receiver_id, exc_info=True)
        return payload

    async def _mark_delivered(self, message_id: UUID) -> None:
        try:
            async with self._uow_factory() as uow:
                await message_service.mark_delivered(message_id, uow)
        except Exception:
            logger.warning("Could not flag message %s as delivered", message_id, exc_info=True)

    async def _message_error(self, conn: Connection, error: str, request: Any) -> None:
        await send_event(conn, OutboundKind.MESSAGE_ERROR, {"error": error, "request": request})
