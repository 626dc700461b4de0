from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class SendMessageDTO:
    property_id: UUID
    sender_id: UUID
    receiver_id: UUID
    body: str


@dataclass(frozen=True, slots=True)
class ParticipantView:
    id: UUID
    name: str


@dataclass(frozen=True, slots=True)
class MessageView:
    """Stored message with sender/receiver names resolved for display."""

    id: UUID
    property_id: UUID
    sender: ParticipantView
    receiver: ParticipantView
    body: str
    created_at: datetime
    delivered: bool
