from __future__ import annotations

from pydantic_settings import BaseSettings


class InventorySettings(BaseSettings):
    """Settings shared by every environment.

    The per-environment classes only change the env file and a few defaults.
    """

    # In-process SQLite unless a real database is configured
    DATABASE_URL: str = "sqlite+pysqlite:///:memory:"
    APP_ENV: str = "local"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # AI summary collaborator (absence is a normal condition)
    API_KEY: str | None = None
    GEMINI_MODEL: str = "gemini-2.0-flash"

    # Notifications
    OVERDUE_DAYS: int = 7

    # Mobile admin gate
    ADMIN_PASSWORD: str = "123456"
    MIN_PASSWORD_LENGTH: int = 4

    # QR batch export
    QR_BOX_SIZE: int = 10
    QR_BORDER: int = 1
    QR_ARCHIVE_FOLDER: str = "asset_qrs"

    # Signature capture surface
    SIGNATURE_DEFAULT_WIDTH: int = 300
    SIGNATURE_HEIGHT: int = 200

    PLACEHOLDER_IMAGE_URL: str = "https://picsum.photos/400/300"
