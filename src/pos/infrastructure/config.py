"""Runtime settings, read from ``POS_*`` environment variables or ``.env``."""

from __future__ import annotations

from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    data_dir: Path = Path("data")
    timezone: str = "Asia/Colombo"
    store_name: str = "My Simple Grocery"
    lock_timeout: float | None = 10.0
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["text", "json"] = "text"
    log_file: Path | None = None

    model_config = SettingsConfigDict(
        env_prefix="POS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone '{value}'") from exc
        return value

    @field_validator("lock_timeout")
    @classmethod
    def _non_negative_timeout(cls, value: float | None) -> float | None:
        if value is not None and value < 0:
            raise ValueError("lock_timeout must be >= 0, or unset to wait forever")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)
