from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from rental_service.api.deps import CurrentPrincipal, PaymentGatewayDep, UoWDep
from rental_service.api.v1.schemas.payment import (
    ConfirmPaymentRequest,
    ConfirmPaymentResponse,
    PaymentIntentRequest,
    PaymentIntentResponse,
)
from rental_service.config import settings
from rental_service.services import payment_service

router = APIRouter(prefix="/api", tags=["payments"])


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    body: PaymentIntentRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
    gateway: PaymentGatewayDep,
) -> PaymentIntentResponse:
    secret = await payment_service.create_payment_intent(
        principal,
        body.property_id,
        body.amount,
        settings.PAYMENT_CURRENCY,
        uow,
        gateway,
    )
    return PaymentIntentResponse(client_secret=secret)


@router.post(
    "/confirm-payment",
    response_model=ConfirmPaymentResponse,
    responses={400: {"model": ConfirmPaymentResponse}},
)
async def confirm_payment(
    body: ConfirmPaymentRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
    gateway: PaymentGatewayDep,
) -> ConfirmPaymentResponse | JSONResponse:
    booked = await payment_service.confirm_payment(
        body.payment_intent_id, body.property_id, uow, gateway,
    )
    if not booked:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": "Payment not completed"},
        )
    return ConfirmPaymentResponse(success=True, message="Payment successful and property booked!")
