"""
SettingsLib - Settings model and persistence

This module holds the runtime settings dataclass and the JSON
settings file storage.
"""

from BC_Libs.SettingsLib.crop_settings import CropSettings
from BC_Libs.SettingsLib.settings_store import (
    get_settings_dir,
    get_settings_path,
    load_settings,
    save_settings,
)

__all__ = [
    "CropSettings",
    "get_settings_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
]
