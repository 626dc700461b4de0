from __future__ import annotations

from pydantic import Field

from rental_service.api.v1.schemas.common import CamelModel


class ContactRequest(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=3, max_length=320)
    phone: str | None = None
    subject: str | None = Field(default=None, max_length=300)
    message: str = Field(min_length=1)
