"""WebSocket chat event envelopes and payloads."""
from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rental_service.application.dto.message import MessageView


class InboundKind(StrEnum):
    """Client → Server event types."""

    USER_CONNECTED = "user_connected"
    SEND_MESSAGE = "send_message"
    GET_MESSAGES = "get_messages"
    PING = "ping"


class OutboundKind(StrEnum):
    """Server → Client event types."""

    MESSAGE_SENT = "message_sent"
    NEW_MESSAGE = "new_message"
    MESSAGE_ERROR = "message_error"
    MESSAGES_HISTORY = "messages_history"
    MESSAGES_ERROR = "messages_error"
    ERROR = "error"
    PONG = "pong"


class WsInbound(BaseModel):
    """Client → Server."""

    type: str
    data: Any = None


class WsOutbound(BaseModel):
    """Server → Client."""

    type: str
    data: Any = {}


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class UserConnectedPayload(_Payload):
    user_id: UUID = Field(alias="userId")

    @classmethod
    def parse(cls, data: Any) -> UserConnectedPayload:
        # Older clients announce the bare id string.
        if isinstance(data, str):
            data = {"userId": data}
        return cls.model_validate(data)


class SendMessagePayload(_Payload):
    property_id: UUID = Field(alias="propertyId")
    sender_id: UUID = Field(alias="senderId")
    receiver_id: UUID = Field(alias="receiverId")
    message: str

    @field_validator("message", mode="before")
    @classmethod
    def _coerce_missing(cls, v: Any) -> Any:
        return "" if v is None else v


class GetMessagesPayload(_Payload):
    property_id: UUID = Field(alias="propertyId")
    user_id_1: UUID = Field(alias="userId1")
    user_id_2: UUID = Field(alias="userId2")


class ParticipantOut(BaseModel):
    id: UUID
    name: str


class MessageOut(_Payload):
    """Stored message as pushed to clients."""

    id: UUID
    property_id: UUID = Field(serialization_alias="propertyId")
    sender: ParticipantOut
    receiver: ParticipantOut
    message: str
    timestamp: datetime
    delivered: bool


def message_payload(view: MessageView) -> dict[str, Any]:
    return MessageOut(
        id=view.id,
        property_id=view.property_id,
        sender=ParticipantOut(id=view.sender.id, name=view.sender.name),
        receiver=ParticipantOut(id=view.receiver.id, name=view.receiver.name),
        message=view.body,
        timestamp=view.created_at,
        delivered=view.delivered,
    ).model_dump(mode="json", by_alias=True)
