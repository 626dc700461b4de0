"""Seed development data: an owner, a tenant, a few listings and a chat thread."""
from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone

from rental_service.application.dto.message import SendMessageDTO
from rental_service.config import settings
from rental_service.domain.entities.property import Property
from rental_service.domain.entities.user import User
from rental_service.domain.value_objects.enums import PropertyType, UserRole
from rental_service.infrastructure.auth.bcrypt_hasher import BcryptHasher
from rental_service.infrastructure.db.uow import open_uow
from rental_service.services import message_service

logger = logging.getLogger(__name__)

DEV_PASSWORD = "password123"

LISTINGS = [
    ("Modern Apartment in Gulshan", "Gulshan 2, Dhaka", "Dhaka", 45000, PropertyType.APARTMENT, 3, 2, 1400, True),
    ("Family House in Dhanmondi", "Road 27, Dhanmondi", "Dhaka", 80000, PropertyType.HOUSE, 4, 3, 2600, True),
    ("Duplex near Agrabad", "Agrabad C/A", "Chittagong", 65000, PropertyType.DUPLEX, 5, 4, 3200, False),
    ("Lake View Villa", "Baridhara Diplomatic Zone", "Dhaka", 250000, PropertyType.VILLA, 6, 5, 5000, True),
]


def _user(name: str, email: str, role: UserRole, password_hash: str, now: datetime) -> User:
    return User(
        id=uuid.uuid4(),
        name=name,
        email=email,
        password_hash=password_hash,
        phone=None,
        role=role.value,
        address=None,
        bio=None,
        created_at=now,
    )


async def seed() -> None:
    hasher = BcryptHasher(settings.BCRYPT_ROUNDS)
    password_hash = hasher.hash(DEV_PASSWORD)
    now = datetime.now(timezone.utc)

    async with open_uow() as uow:
        if await uow.users.get_by_email("owner@example.com") is not None:
            logger.info("Dev data already present, nothing to do")
            return

        owner = await uow.users_w.create(
            _user("Rahim Owner", "owner@example.com", UserRole.OWNER, password_hash, now),
        )
        tenant = await uow.users_w.create(
            _user("Karim Tenant", "tenant@example.com", UserRole.TENANT, password_hash, now),
        )

        listings = []
        for title, location, city, price, kind, beds, baths, size, featured in LISTINGS:
            listings.append(await uow.properties_w.create(Property(
                id=uuid.uuid4(),
                title=title,
                description=f"{title}. Contact the owner through the listing chat.",
                location=location,
                city=city,
                price=price,
                type=kind.value,
                bedrooms=beds,
                bathrooms=baths,
                size=size,
                owner_id=owner.id,
                created_at=now,
                featured=featured,
            )))
        await uow.commit()

        for sender, receiver, body in [
            (tenant, owner, "Hi, is the apartment still available?"),
            (owner, tenant, "Yes, you can visit this weekend."),
            (tenant, owner, "Great, Saturday afternoon works for me."),
        ]:
            await message_service.append_message(
                SendMessageDTO(
                    property_id=listings[0].id,
                    sender_id=sender.id,
                    receiver_id=receiver.id,
                    body=body,
                ),
                uow,
            )

    logger.info(
        "Seeded owner=%s tenant=%s listings=%d (password: %s)",
        owner.email, tenant.email, len(listings), DEV_PASSWORD,
    )


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())


if __name__ == "__main__":
    main()
