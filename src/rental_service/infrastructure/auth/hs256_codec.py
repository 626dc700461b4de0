from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from rental_service.application.dto.principal import Principal
from rental_service.domain.entities.user import User
from rental_service.domain.value_objects.enums import UserRole


class HS256TokenCodec:
    """Issue and verify JWTs signed with a shared HS256 secret."""

    def __init__(self, secret: str, algorithm: str = "HS256", expires_in: timedelta = timedelta(days=7)) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._expires_in = expires_in

    def issue(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role,
            "iat": now,
            "exp": now + self._expires_in,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    async def verify(self, token: str) -> Principal:
        payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        role_raw = payload.get("role", UserRole.TENANT)
        role = UserRole(role_raw) if role_raw in UserRole.__members__.values() else UserRole.TENANT
        return Principal(user_id=UUID(payload["sub"]), role=role)
