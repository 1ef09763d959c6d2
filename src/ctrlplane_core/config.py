"""Configuration settings for ctrlplane-core."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    CTRLPLANE_FILTER_RESOLVE_RETRIES: int = 10
    CTRLPLANE_FILTER_RESOLVE_DELAY_S: float = 1.0
    CTRLPLANE_FILTER_ID_LENGTH: int = 8
    CTRLPLANE_FILTER_MAX_DEPTH: int = 8

    CTRLPLANE_LOG_LEVEL: str = "WARNING"


settings = Settings()
