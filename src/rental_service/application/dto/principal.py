from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from rental_service.domain.value_objects.enums import UserRole


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller identity extracted from JWT."""

    user_id: UUID
    role: UserRole = UserRole.TENANT

    @property
    def is_owner(self) -> bool:
        return self.role == UserRole.OWNER
