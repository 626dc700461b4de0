from __future__ import annotations

from typing import Protocol

from rental_service.application.dto.principal import Principal
from rental_service.domain.entities.user import User


class TokenVerifier(Protocol):
    async def verify(self, token: str) -> Principal: ...


class TokenIssuer(Protocol):
    def issue(self, user: User) -> str: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...

    def verify(self, password: str, password_hash: str) -> bool: ...
