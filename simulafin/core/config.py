"""
Centralized application configuration implementing the 12-Factor App methodology.
Business constants of the financing product live here so they can be tuned per environment.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Immutable configuration schema backed by environment variables."""

    APP_NAME: str = "SimulaFin"
    VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Any SQLAlchemy URL (PostgreSQL in production, SQLite for local runs)
    DATABASE_URL: str = "sqlite:///./simulafin.db"

    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080

    LOG_LEVEL: str = "INFO"

    # Financing product (SAC, fixed rate)
    ANNUAL_INTEREST_RATE: float = 0.12
    MIN_DOWN_PAYMENT_PERCENTAGE: float = 20
    MAX_DOWN_PAYMENT_PERCENTAGE: float = 90
    MIN_TERM_YEARS: int = 1
    MAX_TERM_YEARS: int = 35
    PROPOSAL_VALIDITY_DAYS: int = 30

    # When enabled, admins may only move submissions forward through the review workflow
    STRICT_STATUS_TRANSITIONS: bool = False

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()
