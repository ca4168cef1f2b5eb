from __future__ import annotations

from fastapi.testclient import TestClient

from promo_app.deps import close_stripe_client, get_stripe_client
from promo_app.main import app
from promo_app.settings import Settings


def test_close_stripe_client_clears_cache():
    get_stripe_client.cache_clear()
    stripe_client = get_stripe_client()
    assert get_stripe_client() is stripe_client

    close_stripe_client()

    assert stripe_client._http_client.is_closed
    assert get_stripe_client.cache_info().currsize == 0
    assert get_stripe_client() is not stripe_client
    close_stripe_client()


def test_close_without_client_is_noop():
    get_stripe_client.cache_clear()
    close_stripe_client()
    assert get_stripe_client.cache_info().currsize == 0


def test_shutdown_closes_stripe_client():
    get_stripe_client.cache_clear()
    stripe_client = get_stripe_client()
    with TestClient(app) as test_client:
        assert test_client.get("/healthz").status_code == 200
    assert stripe_client._http_client.is_closed
    assert get_stripe_client.cache_info().currsize == 0


def test_cors_origins_default_to_same_origin_only():
    assert Settings(_env_file=None).CORS_ALLOW_ORIGINS == []
