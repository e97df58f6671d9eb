from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    App settings.

    Notes:
    - Defaults stay local and deterministic, except the cookie signing key,
      which must come from the environment (APP_COOKIE_SIGNING_KEY).
    - Role groups are not settings; they are fixed in `authz.roles`.
    """

    model_config = SettingsConfigDict(env_prefix="APP_", extra="ignore")

    db_url: str | None = None
    log_level: str = "INFO"

    session_cookie_name: str = "login"
    cookie_signing_key: str | None = None

    max_submissions: int = 100

    def resolved_db_url(self) -> str:
        if self.db_url:
            return self.db_url

        repo_root = Path(__file__).resolve().parents[1]
        db_path = repo_root / "submissions.db"
        return f"sqlite:///{db_path}"

    def resolved_cookie_signing_key(self) -> str:
        key = (self.cookie_signing_key or "").strip()
        if not key:
            raise ValueError("APP_COOKIE_SIGNING_KEY must be set")
        return key


@lru_cache
def get_settings() -> Settings:
    return Settings()
