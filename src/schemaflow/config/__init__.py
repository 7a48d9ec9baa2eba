"""Config module - engine settings and their loader."""

from schemaflow.config.base import Settings, configure, get_settings
from schemaflow.config.loader import SettingsLoader, load_settings

__all__ = [
    "Settings",
    "configure",
    "get_settings",
    "SettingsLoader",
    "load_settings",
]
