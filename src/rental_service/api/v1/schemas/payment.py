from __future__ import annotations

from uuid import UUID

from pydantic import Field

from rental_service.api.v1.schemas.common import CamelModel


class PaymentIntentRequest(CamelModel):
    amount: int = Field(gt=0)
    property_id: UUID


class PaymentIntentResponse(CamelModel):
    client_secret: str


class ConfirmPaymentRequest(CamelModel):
    payment_intent_id: str = Field(min_length=1)
    property_id: UUID


class ConfirmPaymentResponse(CamelModel):
    success: bool
    message: str
