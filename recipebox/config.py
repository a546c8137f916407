"""Application settings loaded from the environment (prefix ``RECIPEBOX_``)."""

import logging
from functools import lru_cache

from pydantic import PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RECIPEBOX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "recipebox"
    database_url: str = "sqlite:///./recipes.db"
    log_level: str = "INFO"

    # Import pipeline
    import_batch_size: PositiveInt = 50
    max_reported_failures: int = 10
    author_email_domain: str = "demo.com"

    # Listings
    default_page_size: int = 20

    cors_origins: list[str] = ["*"]


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
