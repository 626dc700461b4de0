from __future__ import annotations

from dataclasses import dataclass

from rental_service.domain.value_objects.enums import UserRole


@dataclass(frozen=True, slots=True)
class RegisterUserDTO:
    name: str
    email: str
    password: str
    phone: str | None = None
    role: UserRole = UserRole.TENANT


@dataclass(frozen=True, slots=True)
class ProfileUpdateDTO:
    name: str | None = None
    phone: str | None = None
    address: str | None = None
    bio: str | None = None
