"""
Application settings for the Style Decor API.

Values come from environment variables and are read when ``Settings`` is
instantiated, so tests can build their own instance.
"""
import os
from dataclasses import dataclass, field


def _env(name: str, default: str) -> str:
    return os.getenv(name, default)


@dataclass
class Settings:
    database_url: str = field(default_factory=lambda: _env("DATABASE_URL", "mongodb://localhost:27017"))
    database_name: str = field(default_factory=lambda: _env("DATABASE_NAME", "styleDecorDB"))
    token_secret: str = field(default_factory=lambda: _env("ACCESS_TOKEN_SECRET", "devsecret"))
    token_expire_minutes: int = field(default_factory=lambda: int(_env("TOKEN_EXPIRE_MINUTES", "60")))
    stripe_secret_key: str = field(default_factory=lambda: _env("STRIPE_SECRET_KEY", ""))
    payment_currency: str = field(default_factory=lambda: _env("PAYMENT_CURRENCY", "usd"))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
    log_file: str = field(default_factory=lambda: _env("LOG_FILE", ""))
    port: int = field(default_factory=lambda: int(_env("PORT", "8000")))
