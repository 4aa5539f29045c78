from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # APP
    APP_NAME: str = "Walking Challenge"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL

    # Activities API
    ACTIVITIES_API_URL: str = "https://apptavn-ynfcnag4xa-uc.a.run.app/activities"
    ACTIVITIES_API_TIMEOUT: float = 30.0

    # Challenge rules
    DAILY_CAP_METERS: float = 10000
    DEFAULT_RANKING_METRIC: Literal["capped", "raw"] = "capped"

    # CORS
    CORS_ORIGINS: list[str] = ["*"]

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Cached settings only loads once"""
    return Settings()
