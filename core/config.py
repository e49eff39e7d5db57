# ==================================================================================
# core/config.py — FinanceOps Configuration (SQLModel + Stripe + Pydantic v2)
# ==================================================================================
import logging
import sys
from typing import List

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # ------------------------
    # DATABASE CONFIG
    # ------------------------
    DATABASE_URL: str = "sqlite:///./financeops.db"

    # ------------------------
    # PROJECT RESOLUTION
    # ------------------------
    # Projects are looked up by (owner/repo, provider).
    PROVIDER: str = "github"

    # ------------------------
    # STRIPE / PAYMENT CONFIG
    # ------------------------
    STRIPE_SECRET_KEY: str | None = None
    STRIPE_CURRENCY: str = "eur"

    # ------------------------
    # CORS
    # ------------------------
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # ------------------------
    # ENVIRONMENT SETTINGS
    # ------------------------
    ENVIRONMENT: str = "development"  # 'development' | 'production'
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # ------------------------
    # Pydantic v2 Settings
    # ------------------------
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# ------------------------
# Global Settings Loader
# ------------------------
try:
    settings = Settings()
    logger.info(f"🌍 Environment: {settings.ENVIRONMENT}, Debug: {settings.DEBUG}")
except ValidationError as e:
    logger.error(f"❌ Environment configuration error — missing or invalid settings! {e}")
    sys.exit(1)
