"""FastAPI dependency injection helpers."""
from __future__ import annotations

from datetime import timedelta
from typing import Annotated, AsyncIterator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from rental_service.application.dto.principal import Principal
from rental_service.application.ports.auth import PasswordHasher
from rental_service.application.ports.payments import PaymentGateway
from rental_service.application.ports.storage import ImageStorage
from rental_service.application.uow import UnitOfWork, UoWFactory
from rental_service.config import settings
from rental_service.infrastructure.auth.bcrypt_hasher import BcryptHasher
from rental_service.infrastructure.auth.hs256_codec import HS256TokenCodec
from rental_service.infrastructure.db.uow import open_uow
from rental_service.infrastructure.payments.stripe_gateway import StripeGateway
from rental_service.infrastructure.storage.local_images import LocalImageStorage

_bearer_scheme = HTTPBearer()


async def get_uow() -> AsyncIterator[UnitOfWork]:
    async with open_uow() as uow:
        yield uow


UoWDep = Annotated[UnitOfWork, Depends(get_uow)]


def get_uow_factory() -> UoWFactory:
    return open_uow


_codec: HS256TokenCodec | None = None


def get_token_codec() -> HS256TokenCodec:
    global _codec  # noqa: PLW0603
    if _codec is None:
        _codec = HS256TokenCodec(
            settings.JWT_SECRET,
            settings.JWT_ALGORITHM,
            expires_in=timedelta(days=settings.JWT_EXPIRES_DAYS),
        )
    return _codec


TokenCodecDep = Annotated[HS256TokenCodec, Depends(get_token_codec)]


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(_bearer_scheme)],
    codec: TokenCodecDep,
) -> Principal:
    try:
        return await codec.verify(credentials.credentials)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        ) from exc


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


def get_hasher() -> PasswordHasher:
    return BcryptHasher(settings.BCRYPT_ROUNDS)


HasherDep = Annotated[PasswordHasher, Depends(get_hasher)]


def get_image_storage() -> ImageStorage:
    return LocalImageStorage(settings.UPLOAD_DIR, settings.UPLOAD_MAX_BYTES)


ImageStorageDep = Annotated[ImageStorage, Depends(get_image_storage)]


def get_payment_gateway() -> PaymentGateway:
    return StripeGateway(settings.STRIPE_SECRET_KEY, settings.STRIPE_API_BASE)


PaymentGatewayDep = Annotated[PaymentGateway, Depends(get_payment_gateway)]
