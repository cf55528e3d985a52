from __future__ import annotations

from pathlib import Path
from pydantic_settings import SettingsConfigDict

from .base import InventorySettings

ROOT = Path(__file__).resolve().parents[1]
ENV_FILE = ROOT / "env" / ".env.test"


class TestSettings(InventorySettings):
    # Keep pytest from collecting this class
    __test__ = False

    APP_ENV: str = "test"
    DEBUG: bool = False
    DATABASE_URL: str = "sqlite+pysqlite:///:memory:"
    API_KEY: str | None = None

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )
