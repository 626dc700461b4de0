from __future__ import annotations

from rental_service.domain.entities.contact import Contact
from rental_service.infrastructure.db.models.contact import ContactModel


def model_to_entity(model: ContactModel) -> Contact:
    return Contact(
        id=model.id,
        name=model.name,
        email=model.email,
        phone=model.phone,
        subject=model.subject,
        message=model.message,
        created_at=model.created_at,
    )


def entity_to_model(entity: Contact) -> ContactModel:
    return ContactModel(
        id=entity.id,
        name=entity.name,
        email=entity.email,
        phone=entity.phone,
        subject=entity.subject,
        message=entity.message,
        created_at=entity.created_at,
    )
