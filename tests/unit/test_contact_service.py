from __future__ import annotations

import pytest

from rental_service.services import contact_service


@pytest.mark.asyncio
async def test_submission_is_stored(uow):
    contact = await contact_service.submit(
        "Rina", "rina@example.com", "Do you allow pets?", uow, subject="Pets",
    )

    assert uow.contacts_w._records == [contact]
    assert contact.subject == "Pets"
    assert contact.phone is None
    assert uow._committed is True
