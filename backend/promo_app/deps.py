from __future__ import annotations

from functools import lru_cache

import httpx

from promo_app.services.stripe import StripeClient
from promo_app.settings import settings


@lru_cache(maxsize=1)
def get_stripe_client() -> StripeClient:
    http_client = httpx.Client(base_url=settings.STRIPE_API_BASE, timeout=settings.STRIPE_TIMEOUT_SECONDS)
    return StripeClient(
        settings.STRIPE_SECRET_KEY,
        base_url=settings.STRIPE_API_BASE,
        api_version=settings.STRIPE_API_VERSION,
        timeout_s=settings.STRIPE_TIMEOUT_SECONDS,
        http_client=http_client,
    )


def close_stripe_client() -> None:
    if get_stripe_client.cache_info().currsize:
        get_stripe_client().close()
        get_stripe_client.cache_clear()
