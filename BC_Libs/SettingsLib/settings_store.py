"""
Settings file storage for Batch Crop.

Settings are stored as JSON alongside a schema version:

    {
      "schema_version": 1,
      "settings": { ... CropSettings fields ... }
    }

A missing or unreadable file yields default settings so the application
always starts.

Functions:
    get_settings_dir: Directory holding the settings file
    get_settings_path: Full path of the settings file
    load_settings: Load CropSettings from disk
    save_settings: Save CropSettings to disk
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from BC_Libs.constants import (
    ENV_SETTINGS_DIR,
    FIELD_SCHEMA_VERSION,
    FIELD_SETTINGS,
    SETTINGS_DIR_NAME,
    SETTINGS_FILE_NAME,
    SETTINGS_SCHEMA_VERSION,
)
from BC_Libs.SettingsLib.crop_settings import CropSettings

logger = logging.getLogger(__name__)


def get_settings_dir(base_dir: Optional[Path] = None) -> Path:
    """
    Resolve the settings directory.

    Precedence: explicit base_dir, then BATCH_CROP_SETTINGS_DIR, then
    ~/.batch_crop.
    """
    if base_dir is not None:
        return Path(base_dir)

    env_dir = (os.getenv(ENV_SETTINGS_DIR) or "").strip()
    if env_dir:
        return Path(env_dir)

    return Path.home() / SETTINGS_DIR_NAME


def get_settings_path(base_dir: Optional[Path] = None) -> Path:
    return get_settings_dir(base_dir) / SETTINGS_FILE_NAME


def load_settings(settings_path: Optional[Path] = None) -> CropSettings:
    """
    Load settings from a JSON file.

    Args:
        settings_path: File to read (default: get_settings_path())

    Returns:
        The stored CropSettings, or defaults if the file is missing,
        malformed, or holds invalid values
    """
    path = Path(settings_path) if settings_path is not None else get_settings_path()

    if not path.exists():
        logger.debug(f"No settings file at {path}, using defaults")
        return CropSettings()

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Failed to read settings from {path}: {e}")
        return CropSettings()

    if not isinstance(payload, dict):
        logger.warning(f"Ignoring settings file {path}: expected a JSON object")
        return CropSettings()

    version = payload.get(FIELD_SCHEMA_VERSION, SETTINGS_SCHEMA_VERSION)
    if version != SETTINGS_SCHEMA_VERSION:
        logger.warning(
            f"Settings schema version {version} does not match {SETTINGS_SCHEMA_VERSION}; "
            f"loading known fields only"
        )

    data = payload.get(FIELD_SETTINGS, {})
    if not isinstance(data, dict):
        logger.warning(f"Ignoring settings file {path}: 'settings' is not an object")
        return CropSettings()

    try:
        settings = CropSettings.from_dict(data)
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid settings in {path}: {e}")
        return CropSettings()

    logger.debug(f"Loaded settings from {path}")
    return settings


def save_settings(settings: CropSettings, settings_path: Optional[Path] = None) -> Path:
    """
    Save settings to a JSON file, creating its directory if needed.

    Returns:
        The path written

    Raises:
        OSError: If the file cannot be written
    """
    path = Path(settings_path) if settings_path is not None else get_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = {
        FIELD_SCHEMA_VERSION: SETTINGS_SCHEMA_VERSION,
        FIELD_SETTINGS: settings.to_dict(),
    }
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    logger.debug(f"Saved settings to {path}")
    return path
