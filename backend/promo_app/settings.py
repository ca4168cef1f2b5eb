from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    HOST: str = "127.0.0.1"
    PORT: int = 5001
    OPEN_BROWSER: bool = True

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Stripe
    STRIPE_SECRET_KEY: str = ""
    STRIPE_API_BASE: str = "https://api.stripe.com"
    # Promotion codes take a top-level `coupon` up to this version.
    STRIPE_API_VERSION: str = "2024-06-20"
    STRIPE_TIMEOUT_SECONDS: float = 30.0

    # Generation
    OPERATORS: list[str] = ["Ilan", "Xavier", "Jean-Yves", "Jeremy"]
    CHUNK_SIZE: int = 4000
    CODE_LENGTH: int = 8
    MAX_CODES_PER_BATCH: int = 100000
    DEFAULT_CURRENCY: str = "eur"

    STATIC_DIR: Path = PACKAGE_DIR / "static"

    # CORS
    CORS_ALLOW_ORIGINS: list[str] = []

settings = Settings()
