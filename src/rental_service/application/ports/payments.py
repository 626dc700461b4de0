from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True, slots=True)
class PaymentIntent:
    id: str
    status: str
    client_secret: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == "succeeded"


class PaymentGateway(Protocol):
    async def create_intent(
        self, amount_minor: int, currency: str, metadata: dict[str, str],
    ) -> PaymentIntent: ...

    async def retrieve_intent(self, intent_id: str) -> PaymentIntent: ...
