from __future__ import annotations

import time

import pytest
from fastapi.testclient import TestClient

from promo_app.deps import get_stripe_client
from promo_app.main import app
from promo_app.services.stripe import StripeApiError


class FakeStripeClient:
    def __init__(self, *, fail_on_call: int | None = None, delay_s: float = 0.0) -> None:
        self.calls: list[dict] = []
        self.fail_on_call = fail_on_call
        self.delay_s = delay_s

    def create_promotion_code(
        self,
        coupon: str,
        *,
        code: str | None = None,
        max_redemptions: int = 1,
        minimum_amount: int | None = None,
        minimum_amount_currency: str | None = None,
    ) -> str:
        if self.fail_on_call is not None and len(self.calls) + 1 >= self.fail_on_call:
            raise StripeApiError("No such coupon: 'missing'", status_code=400, code="resource_missing")
        self.calls.append(
            {
                "coupon": coupon,
                "code": code,
                "max_redemptions": max_redemptions,
                "minimum_amount": minimum_amount,
                "minimum_amount_currency": minimum_amount_currency,
            }
        )
        if self.delay_s:
            time.sleep(self.delay_s)
        return code or f"AUTO{len(self.calls):06d}"


@pytest.fixture()
def fake_stripe():
    return FakeStripeClient()


@pytest.fixture()
def client(fake_stripe):
    app.dependency_overrides[get_stripe_client] = lambda: fake_stripe
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_stripe_client, None)


@pytest.fixture()
def make_stripe():
    return FakeStripeClient
