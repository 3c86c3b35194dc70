"""Configuration management using Pydantic Settings"""

from decimal import Decimal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./circle_ledger.db"

    # Service
    service_name: str = "circle-ledger"
    log_level: str = "INFO"

    # Lending
    loan_monthly_rate: Decimal = Decimal("5")  # Percent per 30-day month

    # Collection summary
    collection_start_period: str = "2025-08"
    opening_collection_balance: Decimal = Decimal("0")  # Dues collected before this ledger existed
    opening_interest_balance: Decimal = Decimal("0")

    # Caller identity, set by the authenticating gateway
    caller_id_header: str = "X-Caller-Id"
    caller_role_header: str = "X-Caller-Role"


settings = Settings()
