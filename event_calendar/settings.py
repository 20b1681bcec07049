from __future__ import annotations

import os
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = Field(..., alias="DATABASE_URL")
    backend_session_secret: str = Field(..., alias="BACKEND_SESSION_SECRET")

    calendar_timezone: str = Field("America/Sao_Paulo", alias="CALENDAR_TIMEZONE")
    calendar_cell_max: int = Field(10, alias="CALENDAR_CELL_MAX")
    event_status_interval_seconds: int = Field(3600, alias="EVENT_STATUS_INTERVAL_SECONDS")

    allowed_emails_raw: str = Field("", alias="ALLOWED_EMAILS")
    editor_emails_raw: str = Field("", alias="EDITOR_EMAILS")

    log_level: str = Field("INFO", alias="BACKEND_LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def allowed_emails(self) -> List[str]:
        return _split_emails(self.allowed_emails_raw)

    @property
    def editor_emails(self) -> List[str]:
        return _split_emails(self.editor_emails_raw)


def _split_emails(raw: str) -> list[str]:
    items = [email.strip().lower() for email in str(raw or "").split(",") if email.strip()]
    dedup = []
    seen = set()
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        dedup.append(item)
    return dedup


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None


# For local dev convenience only.
if os.getenv("BACKEND_DEBUG_SETTINGS"):
    print(get_settings())
