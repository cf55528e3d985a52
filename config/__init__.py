from __future__ import annotations

import os

# Mode selector: MODE wins over APP_ENV; anything unknown runs as 'local'
MODE = (os.environ.get("MODE") or os.environ.get("APP_ENV") or "local").lower()

# Per-environment settings classes; each one names its own env/.env.<mode> file
from .local import LocalSettings
from .prod import ProdSettings
from .test import TestSettings


_MAPPING = {
    "local": LocalSettings,
    "prod": ProdSettings,
    "production": ProdSettings,
    "test": TestSettings,
}


def _choose_settings_class(mode: str):
    return _MAPPING.get(mode, LocalSettings)


SettingsClass = _choose_settings_class(MODE)
settings = SettingsClass()

__all__ = ["settings", "SettingsClass", "MODE"]
