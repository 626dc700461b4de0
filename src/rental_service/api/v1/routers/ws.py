from __future__ import annotations

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect

from rental_service.api.deps import TokenCodecDep, get_uow_factory
from rental_service.application.dto.principal import Principal
from rental_service.application.ports.auth import TokenVerifier
from rental_service.application.uow import UoWFactory
from rental_service.config import settings
from rental_service.infrastructure.ws.protocol import OutboundKind
from rental_service.infrastructure.ws.registry import send_event
from rental_service.services.delivery_service import DeliveryCoordinator

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])

AUTH_FAILED_CLOSE_CODE = 4001


@router.websocket("/ws/chat")
async def ws_chat(
    websocket: WebSocket,
    codec: TokenCodecDep,
    uow_factory: Annotated[UoWFactory, Depends(get_uow_factory)],
    token: str = Query(""),
) -> None:
    principal = await _authenticate(codec, token)
    if principal is None:
        await websocket.close(code=AUTH_FAILED_CLOSE_CODE, reason="Authentication failed")
        return

    await websocket.accept()
    state = websocket.app.state
    coordinator = DeliveryCoordinator(
        state.registry,
        uow_factory,
        relay=getattr(state, "chat_relay", None),
    )

    heartbeat_task = asyncio.create_task(
        _heartbeat(websocket), name=f"ws-heartbeat-{principal.user_id}",
    )
    try:
        while True:
            raw = await websocket.receive_text()
            await coordinator.dispatch(websocket, principal, raw)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS error for user %s", principal.user_id)
    finally:
        heartbeat_task.cancel()
        coordinator.disconnect(websocket)


async def _authenticate(verifier: TokenVerifier, token: str) -> Principal | None:
    if not token:
        return None
    try:
        return await verifier.verify(token)
    except Exception:
        logger.debug("WS auth failed", exc_info=True)
        return None


async def _heartbeat(ws: WebSocket) -> None:
    interval = settings.WS_HEARTBEAT_SECONDS
    while True:
        await asyncio.sleep(interval)
        if not await send_event(ws, OutboundKind.PONG, {}):
            return
