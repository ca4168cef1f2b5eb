from __future__ import annotations

import asyncio
from typing import Any

import structlog
from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from promo_app.schemas.enums import MessageType
from promo_app.schemas.generation import GenerationRequest, SocketMessage
from promo_app.services.generation import PromotionCodeCreator, build_message, generate_codes
from promo_app.settings import Settings, settings as default_settings

logger = structlog.get_logger(__name__)


class GenerationRequestError(ValueError):
    pass


def validation_message(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "Validation failed. " + "; ".join(parts)


def parse_message(raw: str) -> SocketMessage:
    try:
        return SocketMessage.model_validate_json(raw)
    except ValidationError as exc:
        raise GenerationRequestError("Malformed message.") from exc


def parse_request(payload: dict[str, Any] | None, settings: Settings) -> GenerationRequest:
    try:
        request = GenerationRequest.model_validate(payload or {})
    except ValidationError as exc:
        raise GenerationRequestError(validation_message(exc)) from exc
    if request.user not in settings.OPERATORS:
        raise GenerationRequestError(f"Unknown user: {request.user}.")
    if request.count > settings.MAX_CODES_PER_BATCH:
        raise GenerationRequestError(f"Count must not exceed {settings.MAX_CODES_PER_BATCH}.")
    return request


class GenerationSession:
    """Drives at most one generation job for a single socket connection."""

    def __init__(
        self,
        websocket: WebSocket,
        client: PromotionCodeCreator,
        *,
        settings: Settings = default_settings,
    ) -> None:
        self.websocket = websocket
        self.client = client
        self.settings = settings
        self.cancelled = False
        self.closed = False
        self.task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self.task is not None and not self.task.done()

    def is_cancelled(self) -> bool:
        return self.cancelled

    async def send(self, message: dict[str, Any]) -> None:
        if self.closed:
            logger.debug("message_dropped", type=message.get("type"))
            return
        await self.websocket.send_json(message)

    async def send_error(self, message: str) -> None:
        await self.send(build_message(MessageType.ERROR, {"message": message, "running": self.running}))

    async def handle(self, raw: str) -> None:
        try:
            message = parse_message(raw)
        except GenerationRequestError as exc:
            logger.warning("socket_message_rejected", error=str(exc))
            await self.send_error(str(exc))
            return

        if message.type == MessageType.START_GENERATION.value:
            logger.info("start_generation_received")
            await self.start(message.payload)
        elif message.type == MessageType.CANCEL_GENERATION.value:
            logger.info("cancel_generation_received", running=self.running)
            self.cancel()
        else:
            logger.warning("socket_message_unknown", type=message.type)
            await self.send_error(f"Unknown message type: {message.type}.")

    async def start(self, payload: dict[str, Any] | None) -> None:
        if self.running:
            await self.send_error("A generation is already in progress.")
            return
        try:
            request = parse_request(payload, self.settings)
        except GenerationRequestError as exc:
            logger.warning("generation_request_rejected", error=str(exc))
            await self.send_error(str(exc))
            return

        self.cancelled = False
        self.task = asyncio.create_task(self._run(request))

    def cancel(self) -> None:
        self.cancelled = True

    async def _run(self, request: GenerationRequest) -> None:
        try:
            await generate_codes(
                request,
                client=self.client,
                send=self.send,
                is_cancelled=self.is_cancelled,
                chunk_size=self.settings.CHUNK_SIZE,
                code_length=self.settings.CODE_LENGTH,
            )
        except WebSocketDisconnect:
            logger.info("generation_aborted", reason="client_disconnected")
        except Exception:
            if self.closed:
                logger.info("generation_aborted", reason="connection_closed")
                return
            logger.exception("generation_crashed")
            try:
                await self.send(
                    build_message(
                        MessageType.ERROR,
                        {"message": "Unexpected server error.", "fileContents": None, "fileName": None},
                    )
                )
            except (WebSocketDisconnect, RuntimeError) as exc:
                logger.warning("generation_error_undelivered", error=str(exc))

    async def close(self) -> None:
        self.cancelled = True
        self.closed = True
        if self.task is not None:
            await self.task
