from __future__ import annotations

from rental_service.application.dto.principal import Principal
from rental_service.application.exceptions import ForbiddenError, NotFoundError
from rental_service.domain.entities.property import Property


def assert_owner_role(principal: Principal) -> None:
    if not principal.is_owner:
        raise ForbiddenError("Only owners can manage listings")


def assert_property_owner(principal: Principal, prop: Property | None) -> Property:
    """Raise if the listing doesn't exist or belongs to someone else."""
    if prop is None:
        raise NotFoundError("Property not found")
    if prop.owner_id != principal.user_id:
        raise ForbiddenError("Access denied")
    return prop


def assert_thread_participant(principal: Principal, *participants: object) -> None:
    if principal.user_id not in participants:
        raise ForbiddenError("Not a participant of this conversation")
