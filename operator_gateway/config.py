"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "operator-gateway"
    log_level: str = "INFO"

    # Transactions
    default_currency: str = "XAF"

    # Fraud gate
    fraud_velocity_multiplier: float = 5.0  # Trip when amount > multiplier * rolling average
    fraud_window_size: int = 10
    fraud_min_history: int = 3
    fraud_amount_ceiling: int = 5_000_000  # Always trip above this amount


settings = Settings()
