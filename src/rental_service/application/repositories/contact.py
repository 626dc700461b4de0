from __future__ import annotations

from typing import Protocol

from rental_service.domain.entities.contact import Contact


class ContactWriter(Protocol):
    async def add(self, contact: Contact) -> Contact: ...
