from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SocketMessage(BaseModel):
    type: str
    payload: dict[str, Any] | None = None


class GenerationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    coupon: str = Field(min_length=1)
    count: int = Field(ge=0)
    prefix: str | None = None
    minimum_amount: int | None = Field(default=None, ge=0, alias="minimumAmount")
    minimum_amount_currency: str | None = Field(default=None, alias="minimumAmountCurrency")
    user: str = Field(min_length=1)

    @field_validator("coupon", "user", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("prefix", "minimum_amount", "minimum_amount_currency", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            if value == "":
                return None
        return value

    @field_validator("minimum_amount_currency")
    @classmethod
    def _currency_code(cls, value: str | None) -> str | None:
        if value is None:
            return value
        value = value.lower()
        if len(value) != 3 or not value.isalpha():
            raise ValueError("Currency must be a three-letter ISO code.")
        return value

    @property
    def has_minimum_amount(self) -> bool:
        return bool(self.minimum_amount and self.minimum_amount_currency)
