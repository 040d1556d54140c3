"""
Constants and configuration values for Batch Crop.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the application.
"""

# Archive / output naming
ARCHIVE_NAME = "cropped-images.zip"
OUTPUT_FILE_PREFIX = "cropped_"
OUTPUT_FILE_EXTENSION = ".png"
DEFAULT_OUTPUT_FORMAT = "PNG"

# Crop defaults
DEFAULT_CROP_WIDTH_PERCENT = 50.0
UNIT_PIXELS = "px"
UNIT_PERCENT = "%"
SUPPORTED_UNITS = {UNIT_PIXELS, UNIT_PERCENT}

# Dimension handling when sources differ from the reference image
DIMENSION_POLICY_WARN = "warn"
DIMENSION_POLICY_STRICT = "strict"
SUPPORTED_DIMENSION_POLICIES = {DIMENSION_POLICY_WARN, DIMENSION_POLICY_STRICT}

# Supported file formats
SUPPORTED_STANDARD_IMAGES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tiff", ".tif", ".webp"}
IMAGE_MIME_PREFIX = "image/"

# File filter pattern for QFileDialog
STANDARD_IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.tif *.webp)"
ARCHIVE_FILTER = "Zip Archives (*.zip)"

# Display handles
DISPLAY_HANDLE_PREFIX = "handle-"

# Settings persistence
SETTINGS_DIR_NAME = ".batch_crop"
SETTINGS_FILE_NAME = "settings.json"
SETTINGS_SCHEMA_VERSION = 1
FIELD_SCHEMA_VERSION = "schema_version"
FIELD_SETTINGS = "settings"

# Environment overrides
ENV_LOG_LEVEL = "BATCH_CROP_LOG_LEVEL"
ENV_SETTINGS_DIR = "BATCH_CROP_SETTINGS_DIR"

# UI constants
DEFAULT_WINDOW_WIDTH = 1200
DEFAULT_WINDOW_HEIGHT = 820
CROP_VIEW_MIN_WIDTH = 640
CROP_VIEW_MIN_HEIGHT = 480
RESULT_THUMBNAIL_SIZE = 160
SELECTION_COLOR = "#ff3b30"
SELECTION_SHADE_ALPHA = 110
