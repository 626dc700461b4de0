from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from rental_service.api.v1.schemas.common import CamelModel
from rental_service.domain.value_objects.enums import UserRole


class RegisterRequest(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=6, max_length=128)
    phone: str | None = None
    role: UserRole = UserRole.TENANT


class LoginRequest(CamelModel):
    email: str
    password: str


class ProfileUpdateRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    phone: str | None = None
    address: str | None = None
    bio: str | None = None


class UserResponse(CamelModel):
    id: UUID
    name: str
    email: str
    role: str
    phone: str | None = None
    address: str | None = None
    bio: str | None = None
    created_at: datetime


class AuthResponse(CamelModel):
    token: str
    user: UserResponse
