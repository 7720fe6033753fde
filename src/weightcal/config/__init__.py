"""Configuration for weightcal."""

from __future__ import annotations

from weightcal.config.settings import (
    Settings,
    default_config_path,
    get_settings,
    reload_settings,
    set_settings,
)

__all__ = [
    "Settings",
    "default_config_path",
    "get_settings",
    "reload_settings",
    "set_settings",
]
