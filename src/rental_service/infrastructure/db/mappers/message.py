from __future__ import annotations

from rental_service.domain.entities.message import Message
from rental_service.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        property_id=model.property_id,
        sender_id=model.sender_id,
        receiver_id=model.receiver_id,
        body=model.body,
        created_at=model.created_at,
        delivered=model.delivered,
    )


def entity_to_values(entity: Message) -> dict:
    """Insert values; seq is left to the database identity."""
    return {
        "id": entity.id,
        "property_id": entity.property_id,
        "sender_id": entity.sender_id,
        "receiver_id": entity.receiver_id,
        "body": entity.body,
        "created_at": entity.created_at,
        "delivered": entity.delivered,
    }
