from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Bank Ledger API"
    log_level: str = "INFO"

    account_id_prefix: str = "ACC"
    account_id_width: int = Field(default=3, ge=1)
    # None waits for account locks indefinitely
    lock_timeout_seconds: Optional[float] = Field(default=None, gt=0)

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8080",
        "http://localhost:4200",
        "http://127.0.0.1:3000",
    ]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="LEDGER_",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
