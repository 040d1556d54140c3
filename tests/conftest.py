"""
Pytest configuration and shared fixtures for Batch Crop tests.

This module provides image-file factories and shared objects used
across multiple test modules.
"""

import os
from pathlib import Path

import pytest
from PIL import Image

from BC_Libs.CropLib.display_handles import DisplayHandleRegistry
from BC_Libs.SettingsLib.crop_settings import CropSettings

# Qt widget tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


def pattern_pixel(x, y):
    """Pixel value encoding its own coordinates, so crops can be located."""
    return (x % 256, y % 256, (x // 256) * 16 + (y // 256), 255)


def make_pattern_image(width, height):
    image = Image.new("RGBA", (width, height))
    image.putdata([pattern_pixel(x, y) for y in range(height) for x in range(width)])
    return image


@pytest.fixture
def image_factory(tmp_path):
    """
    Provide a factory that writes pattern images into tmp_path.

    Usage:
        path = image_factory("photo.png", (200, 100))
    """
    def factory(name, size=(200, 160), fmt=None):
        path = tmp_path / name
        make_pattern_image(*size).save(path, format=fmt or "PNG")
        return path

    return factory


@pytest.fixture
def broken_image(tmp_path):
    """A file with an image extension that does not hold an image."""
    path = tmp_path / "broken.png"
    path.write_bytes(b"this is not an image")
    return path


@pytest.fixture
def scenario_images(image_factory):
    """Three 1000x800 images, the reference size used by the scaling scenario."""
    return [image_factory(f"shot_{index}.png", (1000, 800)) for index in range(1, 4)]


@pytest.fixture
def registry():
    return DisplayHandleRegistry()


@pytest.fixture
def sequential_settings():
    return CropSettings(use_threading=False)
