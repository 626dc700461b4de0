from __future__ import annotations

import uuid
from datetime import timedelta

from rental_service.application.dto.message import MessageView, ParticipantView, SendMessageDTO
from rental_service.application.exceptions import NotFoundError, ValidationError
from rental_service.application.ports.clock import Clock, UtcClock
from rental_service.application.uow import UnitOfWork
from rental_service.domain.entities.message import Message
from rental_service.domain.entities.user import User
from rental_service.domain.value_objects.thread import ThreadKey

_TICK = timedelta(microseconds=1)


def validate_send(dto: SendMessageDTO) -> None:
    if dto.sender_id == dto.receiver_id:
        raise ValidationError("Cannot send a message to yourself")
    if not dto.body or not dto.body.strip():
        raise ValidationError("Message body must not be empty")


async def append_message(
    dto: SendMessageDTO,
    uow: UnitOfWork,
    clock: Clock | None = None,
) -> Message:
    """Persist a chat message and return the stored record.

    The record's created_at is strictly later than every message already in
    the same thread; the write is committed before this returns.
    """
    msg, _users = await _append(dto, uow, clock)
    return msg


async def append_message_view(
    dto: SendMessageDTO,
    uow: UnitOfWork,
    clock: Clock | None = None,
) -> MessageView:
    """Same as append_message, with participant names resolved."""
    msg, users = await _append(dto, uow, clock)
    return _to_view(msg, users)


async def _append(
    dto: SendMessageDTO,
    uow: UnitOfWork,
    clock: Clock | None,
) -> tuple[Message, dict[uuid.UUID, User]]:
    validate_send(dto)

    if await uow.properties.get_by_id(dto.property_id) is None:
        raise NotFoundError("Property not found")
    users = await uow.users.get_many([dto.sender_id, dto.receiver_id])
    if dto.sender_id not in users:
        raise NotFoundError("Sender not found")
    if dto.receiver_id not in users:
        raise NotFoundError("Receiver not found")

    key = ThreadKey.of(dto.property_id, dto.sender_id, dto.receiver_id)
    await uow.messages_w.lock_thread(key)

    created_at = (clock or UtcClock()).now()
    latest = await uow.messages.latest_created_at(key)
    if latest is not None and created_at <= latest:
        created_at = latest + _TICK

    msg = Message(
        id=uuid.uuid4(),
        property_id=dto.property_id,
        sender_id=dto.sender_id,
        receiver_id=dto.receiver_id,
        body=dto.body,
        created_at=created_at,
        delivered=False,
    )
    msg = await uow.messages_w.append(msg)
    await uow.commit()
    return msg, users


async def query_thread(
    property_id: uuid.UUID,
    user_a: uuid.UUID,
    user_b: uuid.UUID,
    uow: UnitOfWork,
) -> list[Message]:
    # No pagination: the whole thread is recomputed on every call.
    return await uow.messages.list_thread(ThreadKey.of(property_id, user_a, user_b))


async def mark_delivered(message_id: uuid.UUID, uow: UnitOfWork) -> None:
    await uow.messages_w.mark_delivered(message_id)
    await uow.commit()


async def to_views(messages: list[Message], uow: UnitOfWork) -> list[MessageView]:
    """Resolve sender/receiver display names."""
    ids = {m.sender_id for m in messages} | {m.receiver_id for m in messages}
    users = await uow.users.get_many(list(ids))
    return [_to_view(m, users) for m in messages]


def _participant(user_id: uuid.UUID, users: dict[uuid.UUID, User]) -> ParticipantView:
    user = users.get(user_id)
    return ParticipantView(id=user_id, name=user.name if user else "")


def _to_view(msg: Message, users: dict[uuid.UUID, User]) -> MessageView:
    return MessageView(
        id=msg.id,
        property_id=msg.property_id,
        sender=_participant(msg.sender_id, users),
        receiver=_participant(msg.receiver_id, users),
        body=msg.body,
        created_at=msg.created_at,
        delivered=msg.delivered,
    )
