from __future__ import annotations

import logging
from typing import Any

from rental_service.application.dto.principal import Principal
from rental_service.application.policies.permissions import assert_thread_participant
from rental_service.application.uow import UoWFactory
from rental_service.infrastructure.ws.protocol import GetMessagesPayload, message_payload
from rental_service.services import message_service

logger = logging.getLogger(__name__)


class HistoryLoader:
    """Loads the full ordered thread between two users for one listing."""

    def __init__(self, uow_factory: UoWFactory) -> None:
        self._uow_factory = uow_factory

    async def load(self, principal: Principal, request: GetMessagesPayload) -> list[dict[str, Any]]:
        assert_thread_participant(principal, request.user_id_1, request.user_id_2)
        async with self._uow_factory() as uow:
            messages = await message_service.query_thread(
                request.property_id, request.user_id_1, request.user_id_2, uow,
            )
            views = await message_service.to_views(messages, uow)
        logger.debug(
            "Loaded %d messages for property=%s requester=%s",
            len(views), request.property_id, principal.user_id,
        )
        return [message_payload(v) for v in views]
