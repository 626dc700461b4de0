from __future__ import annotations

from rental_service.domain.entities.user import User
from rental_service.infrastructure.db.models.user import UserModel


def model_to_entity(model: UserModel) -> User:
    return User(
        id=model.id,
        name=model.name,
        email=model.email,
        password_hash=model.password_hash,
        phone=model.phone,
        role=model.role,
        address=model.address,
        bio=model.bio,
        created_at=model.created_at,
    )


def entity_to_model(entity: User) -> UserModel:
    return UserModel(
        id=entity.id,
        name=entity.name,
        email=entity.email,
        password_hash=entity.password_hash,
        phone=entity.phone,
        role=entity.role,
        address=entity.address,
        bio=entity.bio,
        created_at=entity.created_at,
    )
