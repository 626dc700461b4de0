"""Partition key of a chat thread: one listing plus an unordered user pair."""
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, slots=True)
class ThreadKey:
    property_id: UUID
    low_user_id: UUID
    high_user_id: UUID

    @classmethod
    def of(cls, property_id: UUID, user_a: UUID, user_b: UUID) -> ThreadKey:
        low, high = sorted((user_a, user_b))
        return cls(property_id=property_id, low_user_id=low, high_user_id=high)

    def participants(self) -> tuple[UUID, UUID]:
        return self.low_user_id, self.high_user_id

    def __str__(self) -> str:
        return f"{self.property_id}:{self.low_user_id}:{self.high_user_id}"
