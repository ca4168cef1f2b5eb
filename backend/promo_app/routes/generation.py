from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from promo_app.deps import get_stripe_client
from promo_app.services.socket_session import GenerationSession
from promo_app.services.stripe import StripeClient

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.websocket("/ws")
@router.websocket("/")
async def generation_socket(
    websocket: WebSocket,
    stripe_client: StripeClient = Depends(get_stripe_client),
) -> None:
    await websocket.accept()
    client_host = websocket.client.host if websocket.client else None
    logger.info("client_connected", client=client_host)
    session = GenerationSession(websocket, stripe_client)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            raw = message.get("text")
            if raw is None:
                raw = (message.get("bytes") or b"").decode("utf-8", "replace")
            await session.handle(raw)
    except WebSocketDisconnect:
        logger.info("client_disconnected", client=client_host, running=session.running)
    finally:
        await session.close()
