"""Application settings for the recommendation API.

Values come from environment variables prefixed with ``STOREFRONT_`` or
from a ``.env`` file in the working directory.
"""

from functools import lru_cache
from typing import Dict

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.recommender.models import CHANNELS
from src.recommender.service import RecommenderConfig
from src.recommender.stores import DEFAULT_CATALOG_PATH, DEFAULT_ORDERS_PATH


class Settings(BaseSettings):
    """Recommendation API settings."""

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Storefront Recommender API"
    log_level: str = "INFO"

    # Data
    catalog_path: str = DEFAULT_CATALOG_PATH
    orders_path: str = DEFAULT_ORDERS_PATH

    # Recommendations
    top_n: int = 4
    order_limit: int = 10
    excluded_status: str = "cancelled"
    channel_weights: Dict[str, float] = {}

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator("channel_weights")
    @classmethod
    def validate_channel_weights(cls, v: Dict[str, float]) -> Dict[str, float]:
        unknown = set(v) - set(CHANNELS)
        if unknown:
            raise ValueError(f"Unknown channels: {sorted(unknown)}")
        return v

    def recommender_config(self) -> RecommenderConfig:
        return RecommenderConfig(
            top_n=self.top_n,
            order_limit=self.order_limit,
            excluded_status=self.excluded_status,
            channel_weights=dict(self.channel_weights),
        )


@lru_cache
def get_settings() -> Settings:
    """Get the settings instance (cached)."""
    return Settings()
