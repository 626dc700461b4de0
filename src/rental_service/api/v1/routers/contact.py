from __future__ import annotations

from fastapi import APIRouter

from rental_service.api.deps import UoWDep
from rental_service.api.v1.schemas.common import MessageResponse
from rental_service.api.v1.schemas.contact import ContactRequest
from rental_service.services import contact_service

router = APIRouter(prefix="/api", tags=["contact"])


@router.post("/contact", response_model=MessageResponse)
async def submit_contact(body: ContactRequest, uow: UoWDep) -> MessageResponse:
    await contact_service.submit(
        body.name,
        body.email,
        body.message,
        uow,
        phone=body.phone,
        subject=body.subject,
    )
    return MessageResponse(message="Message sent successfully")
