from __future__ import annotations

from typing import Any

import httpx
import structlog

logger = structlog.get_logger(__name__)

PROMOTION_CODES_ENDPOINT = "/v1/promotion_codes"


class StripeApiError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


class StripeClient:
    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.stripe.com",
        api_version: str | None = None,
        timeout_s: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.api_version = api_version
        self.timeout = timeout_s
        self._http_client = http_client

    def _headers(self) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self.api_key}", "Accept": "application/json"}
        if self.api_version:
            headers["Stripe-Version"] = self.api_version
        return headers

    def _client(self) -> httpx.Client:
        return httpx.Client(base_url=self.base_url, headers=self._headers(), timeout=self.timeout)

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        if not self.api_key:
            raise StripeApiError("Stripe secret key is not configured.")
        if self._http_client:
            return self._http_client.request(method, url, headers=self._headers(), **kwargs)
        with self._client() as client:
            return client.request(method, url, **kwargs)

    def close(self) -> None:
        if self._http_client:
            self._http_client.close()

    def create_promotion_code(
        self,
        coupon: str,
        *,
        code: str | None = None,
        max_redemptions: int = 1,
        minimum_amount: int | None = None,
        minimum_amount_currency: str | None = None,
    ) -> str:
        data: dict[str, Any] = {"coupon": coupon, "max_redemptions": max_redemptions}
        if code:
            data["code"] = code
        if minimum_amount and minimum_amount_currency:
            data["restrictions[minimum_amount]"] = minimum_amount
            data["restrictions[minimum_amount_currency]"] = minimum_amount_currency
        try:
            response = self._request("POST", PROMOTION_CODES_ENDPOINT, data=data)
        except httpx.HTTPError as exc:
            logger.error("stripe_request_failed", endpoint="POST promotion_codes", coupon=coupon, error=str(exc))
            raise StripeApiError("Stripe request failed.") from exc
        if response.status_code >= 400:
            message, error_code = _error_details(response)
            logger.error(
                "stripe_request_error",
                endpoint="POST promotion_codes",
                coupon=coupon,
                status_code=response.status_code,
                error_code=error_code,
            )
            raise StripeApiError(message, status_code=response.status_code, code=error_code)
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            logger.error("stripe_invalid_response", endpoint="POST promotion_codes", status_code=response.status_code)
            raise StripeApiError("Stripe returned an invalid response.", status_code=response.status_code)
        promo_code = payload.get("code")
        if not promo_code:
            raise StripeApiError("Stripe response missing promotion code.", status_code=response.status_code)
        return promo_code


def _error_details(response: httpx.Response) -> tuple[str, str | None]:
    try:
        payload = response.json()
    except ValueError:
        return "Stripe returned an error.", None
    error = payload.get("error") if isinstance(payload, dict) else None
    if not isinstance(error, dict):
        return "Stripe returned an error.", None
    return error.get("message") or "Stripe returned an error.", error.get("code")
