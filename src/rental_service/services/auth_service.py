from __future__ import annotations

import logging
import uuid
from dataclasses import asdict
from datetime import datetime, timezone

from rental_service.application.dto.principal import Principal
from rental_service.application.dto.user import ProfileUpdateDTO, RegisterUserDTO
from rental_service.application.exceptions import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
)
from rental_service.application.ports.auth import PasswordHasher, TokenIssuer
from rental_service.application.uow import UnitOfWork
from rental_service.domain.entities.user import User

logger = logging.getLogger(__name__)


async def register(
    dto: RegisterUserDTO,
    uow: UnitOfWork,
    hasher: PasswordHasher,
    issuer: TokenIssuer,
) -> tuple[User, str]:
    """Create an account and return it together with a fresh bearer token."""
    email = dto.email.strip().lower()
    if await uow.users.get_by_email(email) is not None:
        raise ConflictError("User already exists")

    user = User(
        id=uuid.uuid4(),
        name=dto.name,
        email=email,
        password_hash=hasher.hash(dto.password),
        phone=dto.phone,
        role=dto.role.value,
        address=None,
        bio=None,
        created_at=datetime.now(timezone.utc),
    )
    user = await uow.users_w.create(user)
    await uow.commit()
    logger.info("Registered %s user %s", user.role, user.id)
    return user, issuer.issue(user)


async def login(
    email: str,
    password: str,
    uow: UnitOfWork,
    hasher: PasswordHasher,
    issuer: TokenIssuer,
) -> tuple[User, str]:
    user = await uow.users.get_by_email(email.strip().lower())
    if user is None or not hasher.verify(password, user.password_hash):
        raise InvalidCredentialsError("Invalid credentials")
    return user, issuer.issue(user)


async def get_profile(principal: Principal, uow: UnitOfWork) -> User:
    user = await uow.users.get_by_id(principal.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def update_profile(
    principal: Principal,
    dto: ProfileUpdateDTO,
    uow: UnitOfWork,
) -> User:
    values = {k: v for k, v in asdict(dto).items() if v is not None}
    if not values:
        return await get_profile(principal, uow)

    user = await uow.users_w.update(principal.user_id, values)
    if user is None:
        raise NotFoundError("User not found")
    await uow.commit()
    return user
