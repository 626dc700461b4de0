from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Contact:
    id: UUID
    name: str
    email: str
    phone: str | None
    subject: str | None
    message: str
    created_at: datetime
