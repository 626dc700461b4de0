from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from rental_service.application.dto.principal import Principal
from rental_service.application.dto.property import PropertyDraftDTO, PropertyFilterDTO
from rental_service.application.exceptions import NotFoundError
from rental_service.application.policies.permissions import (
    assert_owner_role,
    assert_property_owner,
)
from rental_service.application.uow import UnitOfWork
from rental_service.domain.entities.property import Property

logger = logging.getLogger(__name__)

_UPDATABLE = frozenset({
    "title", "description", "location", "city", "price", "type",
    "bedrooms", "bathrooms", "size", "featured", "available", "images",
})


async def search(filters: PropertyFilterDTO, uow: UnitOfWork) -> list[Property]:
    return await uow.properties.search(filters)


async def list_featured(limit: int, uow: UnitOfWork) -> list[Property]:
    return await uow.properties.list_featured(limit)


async def get_property(property_id: uuid.UUID, uow: UnitOfWork) -> Property:
    prop = await uow.properties.get_by_id(property_id)
    if prop is None:
        raise NotFoundError("Property not found")
    return prop


def assert_can_list(principal: Principal) -> None:
    assert_owner_role(principal)


async def get_owned(principal: Principal, property_id: uuid.UUID, uow: UnitOfWork) -> Property:
    return assert_property_owner(principal, await uow.properties.get_by_id(property_id))


async def list_owned(principal: Principal, uow: UnitOfWork) -> list[Property]:
    return await uow.properties.list_for_owner(principal.user_id)


async def create_property(
    principal: Principal,
    draft: PropertyDraftDTO,
    uow: UnitOfWork,
) -> Property:
    assert_owner_role(principal)
    prop = Property(
        id=uuid.uuid4(),
        title=draft.title,
        description=draft.description,
        location=draft.location,
        city=draft.city,
        price=draft.price,
        type=draft.type.value,
        bedrooms=draft.bedrooms,
        bathrooms=draft.bathrooms,
        size=draft.size,
        owner_id=principal.user_id,
        created_at=datetime.now(timezone.utc),
        images=list(draft.images),
        featured=draft.featured,
        available=True,
    )
    prop = await uow.properties_w.create(prop)
    await uow.commit()
    logger.info("Owner %s listed property %s", principal.user_id, prop.id)
    return prop


async def update_property(
    principal: Principal,
    property_id: uuid.UUID,
    changes: dict[str, Any],
    uow: UnitOfWork,
) -> Property:
    """Apply a partial update; a non-empty ``images`` list replaces the old set."""
    assert_property_owner(principal, await uow.properties.get_by_id(property_id))

    values = {k: v for k, v in changes.items() if k in _UPDATABLE and v is not None}
    if values.get("images") == []:
        del values["images"]
    if "type" in values:
        values["type"] = str(values["type"])
    if not values:
        return await get_property(property_id, uow)

    prop = await uow.properties_w.update(property_id, values)
    if prop is None:
        raise NotFoundError("Property not found")
    await uow.commit()
    return prop


async def delete_property(
    principal: Principal,
    property_id: uuid.UUID,
    uow: UnitOfWork,
) -> None:
    assert_property_owner(principal, await uow.properties.get_by_id(property_id))
    await uow.properties_w.delete(property_id)
    await uow.commit()
    logger.info("Owner %s deleted property %s", principal.user_id, property_id)
