from __future__ import annotations

import threading
import webbrowser

import structlog
import uvicorn

from promo_app.log_config import configure_logging
from promo_app.settings import settings

logger = structlog.get_logger(__name__)


def main() -> None:
    configure_logging(settings.LOG_LEVEL, json=settings.LOG_JSON)
    url = f"http://localhost:{settings.PORT}"
    logger.info("server_starting", host=settings.HOST, port=settings.PORT, url=url)
    if settings.OPEN_BROWSER:
        # Give uvicorn a moment to bind before the browser connects.
        threading.Timer(1.0, webbrowser.open, args=(url,)).start()
    uvicorn.run("promo_app.main:app", host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
