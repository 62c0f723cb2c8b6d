from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Use sqlite file in repo root for dev
    DATABASE_URL: str = "sqlite:///./waqf.db"

    # Admin routes are open when no key is configured (dev only)
    ADMIN_API_KEY: Optional[str] = None

    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    DEFAULT_CURRENCY: str = "XOF"
    # flat shipping fee applied to every order
    SHIPPING_COST: int = 0

    # Payment provider (placeholder checkout, no real gateway yet)
    PAYMENT_CHECKOUT_URL: str = "https://payment-provider.com/pay"
    PAYMENT_EXPIRY_MINUTES: int = 30

    # forgot-password tokens, delivered out of band
    PASSWORD_RESET_EXPIRY_MINUTES: int = 60

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
