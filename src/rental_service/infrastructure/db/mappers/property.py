from __future__ import annotations

from rental_service.domain.entities.property import Property
from rental_service.infrastructure.db.models.property import PropertyModel


def model_to_entity(model: PropertyModel) -> Property:
    return Property(
        id=model.id,
        title=model.title,
        description=model.description,
        location=model.location,
        city=model.city,
        price=model.price,
        type=model.type,
        bedrooms=model.bedrooms,
        bathrooms=model.bathrooms,
        size=model.size,
        owner_id=model.owner_id,
        created_at=model.created_at,
        images=list(model.images or []),
        featured=model.featured,
        available=model.available,
    )


def entity_to_model(entity: Property) -> PropertyModel:
    return PropertyModel(
        id=entity.id,
        title=entity.title,
        description=entity.description,
        location=entity.location,
        city=entity.city,
        price=entity.price,
        type=entity.type,
        bedrooms=entity.bedrooms,
        bathrooms=entity.bathrooms,
        size=entity.size,
        owner_id=entity.owner_id,
        created_at=entity.created_at,
        images=list(entity.images),
        featured=entity.featured,
        available=entity.available,
    )
