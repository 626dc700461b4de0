from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from rental_service.application.uow import UnitOfWork
from rental_service.domain.entities.contact import Contact

logger = logging.getLogger(__name__)


async def submit(
    name: str,
    email: str,
    message: str,
    uow: UnitOfWork,
    *,
    phone: str | None = None,
    subject: str | None = None,
) -> Contact:
    contact = Contact(
        id=uuid.uuid4(),
        name=name,
        email=email,
        phone=phone,
        subject=subject,
        message=message,
        created_at=datetime.now(timezone.utc),
    )
    contact = await uow.contacts_w.add(contact)
    await uow.commit()
    logger.info("Contact form submission %s from %s", contact.id, contact.email)
    return contact
