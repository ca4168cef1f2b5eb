from __future__ import annotations

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from promo_app.deps import close_stripe_client
from promo_app.log_config import configure_logging
from promo_app.routes import client, generation
from promo_app.settings import settings

configure_logging(settings.LOG_LEVEL, json=settings.LOG_JSON)
logger = structlog.get_logger(__name__)

app = FastAPI(title="Promotion Code Generator", version="0.1.0")

# Error envelope
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict):
        if exc.detail.get("ok") is False:
            return JSONResponse(status_code=exc.status_code, content=exc.detail)
        if "code" in exc.detail and "message" in exc.detail:
            return JSONResponse(status_code=exc.status_code, content={"ok": False, "error": exc.detail})
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": {"code": "HTTP_ERROR", "message": str(exc.detail)}},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("shutdown")
def on_shutdown() -> None:
    close_stripe_client()
    logger.info("server_shutdown")


@app.get("/healthz")
def healthz() -> dict:
    return {"ok": True}


app.include_router(generation.router, tags=["generation"])
# Catch-all client route, keep last.
app.include_router(client.router, tags=["client"])
