from __future__ import annotations

import logging
import uuid

from rental_service.application.dto.principal import Principal
from rental_service.application.exceptions import NotFoundError, ValidationError
from rental_service.application.ports.payments import PaymentGateway
from rental_service.application.uow import UnitOfWork
from rental_service.services import property_service

logger = logging.getLogger(__name__)


async def create_payment_intent(
    principal: Principal,
    property_id: uuid.UUID,
    amount: int,
    currency: str,
    uow: UnitOfWork,
    gateway: PaymentGateway,
) -> str:
    """Open a payment intent for reserving a listing and return its client secret."""
    if amount <= 0:
        raise ValidationError("Amount must be positive")
    await property_service.get_property(property_id, uow)

    intent = await gateway.create_intent(
        amount * 100,
        currency,
        {"propertyId": str(property_id), "userId": str(principal.user_id)},
    )
    logger.info("Payment intent %s created for property %s", intent.id, property_id)
    return intent.client_secret or ""


async def confirm_payment(
    intent_id: str,
    property_id: uuid.UUID,
    uow: UnitOfWork,
    gateway: PaymentGateway,
) -> bool:
    """Book the listing if the intent succeeded; return whether it did."""
    intent = await gateway.retrieve_intent(intent_id)
    if intent.metadata.get("propertyId") != str(property_id):
        logger.warning(
            "Payment intent %s was not opened for property %s", intent_id, property_id,
        )
        raise ValidationError("Payment does not match this property")
    if not intent.succeeded:
        logger.info("Payment intent %s not completed (status=%s)", intent_id, intent.status)
        return False

    prop = await uow.properties_w.update(property_id, {"available": False})
    if prop is None:
        raise NotFoundError("Property not found")
    await uow.commit()
    logger.info("Property %s booked via payment intent %s", property_id, intent_id)
    return True
