from __future__ import annotations

import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Protocol

import httpx
import structlog
from fastapi.concurrency import run_in_threadpool

from promo_app.schemas.enums import GenerationStatus, MessageType
from promo_app.schemas.generation import GenerationRequest
from promo_app.services import export
from promo_app.services.stripe import StripeApiError

logger = structlog.get_logger(__name__)

DEFAULT_CHUNK_SIZE = 4000
DEFAULT_CODE_LENGTH = 8

SendMessage = Callable[[dict[str, Any]], Awaitable[None]]
CancelCheck = Callable[[], bool]


class PromotionCodeCreator(Protocol):
    def create_promotion_code(
        self,
        coupon: str,
        *,
        code: str | None = None,
        max_redemptions: int = 1,
        minimum_amount: int | None = None,
        minimum_amount_currency: str | None = None,
    ) -> str: ...


@dataclass
class GenerationOutcome:
    status: GenerationStatus
    generated: int
    files: list[str] = field(default_factory=list)


def build_message(message_type: MessageType, payload: dict[str, Any] | None = None) -> dict[str, Any]:
    message: dict[str, Any] = {"type": message_type.value}
    if payload is not None:
        message["payload"] = payload
    return message


def random_code(length: int = DEFAULT_CODE_LENGTH) -> str:
    alphabet = string.ascii_uppercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def promotion_code_params(request: GenerationRequest, code_length: int = DEFAULT_CODE_LENGTH) -> dict[str, Any]:
    """Keyword arguments for one ``create_promotion_code`` call.

    Without a prefix the code is left to Stripe. Each code is single use.
    """
    params: dict[str, Any] = {
        "code": f"{request.prefix}{random_code(code_length)}" if request.prefix else None,
        "max_redemptions": 1,
    }
    if request.has_minimum_amount:
        params["minimum_amount"] = request.minimum_amount
        params["minimum_amount_currency"] = request.minimum_amount_currency
    return params


async def _file_payload(codes: list[str], user: str, generated_at: datetime, file_name: str) -> dict[str, Any]:
    if not codes:
        return {"fileContents": None, "fileName": None}
    contents = await run_in_threadpool(export.encode_workbook, list(codes), user, generated_at)
    return {"fileContents": contents, "fileName": file_name}


async def generate_codes(
    request: GenerationRequest,
    *,
    client: PromotionCodeCreator,
    send: SendMessage,
    is_cancelled: CancelCheck,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    code_length: int = DEFAULT_CODE_LENGTH,
    generated_at: datetime | None = None,
) -> GenerationOutcome:
    """Mint ``request.count`` promotion codes, one Stripe call each.

    Progress is reported after every code. Every ``chunk_size`` codes the
    pending codes are exported and sent as a partial file, unless that chunk
    ends the batch, in which case they go out with the final file.
    Cancellation is polled before each call.
    """
    generated_at = generated_at or datetime.now(timezone.utc)
    total = request.count
    pending: list[str] = []
    outcome = GenerationOutcome(status=GenerationStatus.COMPLETED, generated=0)
    log = logger.bind(coupon=request.coupon, user=request.user, total=total)
    log.info("generation_started", chunk_size=chunk_size, prefix=request.prefix)

    try:
        for index in range(total):
            if is_cancelled():
                outcome.status = GenerationStatus.CANCELLED
                payload = await _file_payload(
                    pending, request.user, generated_at, export.cancelled_file_name(generated_at)
                )
                if payload["fileName"]:
                    outcome.files.append(payload["fileName"])
                log.info("generation_cancelled", generated=outcome.generated, flushed=len(pending))
                await send(build_message(MessageType.GENERATION_CANCELLED, payload))
                return outcome

            params = promotion_code_params(request, code_length)
            code = await run_in_threadpool(client.create_promotion_code, request.coupon, **params)
            pending.append(code)
            outcome.generated = index + 1

            await send(
                build_message(MessageType.PROGRESS_UPDATE, {"generated": outcome.generated, "total": total})
            )

            if outcome.generated % chunk_size == 0 and outcome.generated < total:
                part = outcome.generated // chunk_size
                payload = await _file_payload(
                    pending, request.user, generated_at, export.partial_file_name(part, generated_at)
                )
                outcome.files.append(payload["fileName"])
                log.info("partial_file_sent", part=part, file_name=payload["fileName"], codes=len(pending))
                await send(build_message(MessageType.PARTIAL_FILE_GENERATED, payload))
                pending = []
    except (StripeApiError, httpx.HTTPError) as exc:
        outcome.status = GenerationStatus.FAILED
        log.error("generation_failed", generated=outcome.generated, error=str(exc))
        payload = await _file_payload(pending, request.user, generated_at, export.failed_file_name(generated_at))
        if payload["fileName"]:
            outcome.files.append(payload["fileName"])
        await send(build_message(MessageType.ERROR, {"message": str(exc), **payload}))
        return outcome

    payload = await _file_payload(pending, request.user, generated_at, export.final_file_name(generated_at))
    if payload["fileName"]:
        outcome.files.append(payload["fileName"])
    log.info("generation_complete", generated=outcome.generated, file_name=payload["fileName"])
    await send(build_message(MessageType.GENERATION_COMPLETE, payload))
    return outcome
