from __future__ import annotations

import logging
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Rules
    starting_player: Literal["red", "black"] = "red"

    # Simulator safety limit for chained auto-resolve phases
    max_auto_resolve_steps: int = 50

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="NONAGA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=(level or settings.log_level).upper())
