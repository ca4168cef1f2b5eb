from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from promo_app.settings import settings

router = APIRouter()


@router.get("/api/config")
def client_config() -> dict:
    return {
        "ok": True,
        "data": {
            "users": settings.OPERATORS,
            "default_currency": settings.DEFAULT_CURRENCY,
            "max_codes": settings.MAX_CODES_PER_BATCH,
            "chunk_size": settings.CHUNK_SIZE,
        },
    }


@router.get("/{path:path}", include_in_schema=False)
def client_files(path: str) -> FileResponse:
    static_dir = Path(settings.STATIC_DIR).resolve()
    candidate = (static_dir / path).resolve()
    if path and candidate.is_file() and candidate.is_relative_to(static_dir):
        return FileResponse(candidate)
    index = static_dir / "index.html"
    if not index.is_file():
        raise HTTPException(
            status_code=404,
            detail={"ok": False, "error": {"code": "NOT_FOUND", "message": "Client build not found."}},
        )
    return FileResponse(index)
