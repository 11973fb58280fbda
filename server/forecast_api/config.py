"""Application configuration loaded from environment variables."""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

from goal_forecast.models import ForecastMode


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Forecast defaults, used when a request does not override them
    default_mode: ForecastMode = ForecastMode.YTD
    blend_weight_rolling: float = Field(default=0.6, ge=0.0, le=1.0)
    include_commute: bool = True

    # API configuration
    api_host: str = "127.0.0.1"
    api_port: int = 8083

    # CORS
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    class Config:
        env_prefix = "FORECAST_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
