"""
Upload collection for Batch Crop.

Turns a user's file selection (drag-drop or file dialog) into SourceImage
objects, rejecting anything that is not an image.

Functions:
    is_image_file: Check whether a path names a supported image
    filter_image_paths: Keep supported image paths, in order
    collect_uploads: Build SourceImages with display handles
    read_natural_size: Decode an image header for its pixel size
"""

import logging
import mimetypes
from pathlib import Path
from typing import Iterable, List, Union

from PIL import Image

from BC_Libs.constants import IMAGE_MIME_PREFIX, SUPPORTED_STANDARD_IMAGES
from BC_Libs.CropLib.crop_errors import CropValidationError, DecodeError
from BC_Libs.CropLib.crop_models import ImageSize, SourceImage
from BC_Libs.CropLib.display_handles import DisplayHandleRegistry

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Image types missing from some platforms' mimetypes tables
_FALLBACK_MIME_TYPES = {".webp": "image/webp"}


def is_image_file(path: PathLike) -> bool:
    """
    Check if a path has an image MIME type and a supported extension.

    Args:
        path: Path to check (the file is not opened)

    Returns:
        True if the path looks like a supported image
    """
    path = Path(path)
    mime_type, _ = mimetypes.guess_type(path.name)
    if mime_type is None:
        mime_type = _FALLBACK_MIME_TYPES.get(path.suffix.lower())
    if not mime_type or not mime_type.startswith(IMAGE_MIME_PREFIX):
        return False
    return path.suffix.lower() in SUPPORTED_STANDARD_IMAGES


def filter_image_paths(paths: Iterable[PathLike]) -> List[Path]:
    """Keep existing image files from paths, preserving order."""
    accepted: List[Path] = []
    for raw in paths:
        path = Path(raw)
        if not path.is_file():
            logger.debug(f"Skipping {path}: not a file")
            continue
        if not is_image_file(path):
            logger.debug(f"Skipping {path}: not a supported image type")
            continue
        accepted.append(path)
    return accepted


def collect_uploads(paths: Iterable[PathLike], registry: DisplayHandleRegistry) -> List[SourceImage]:
    """
    Accept a file selection and allocate a display handle per image.

    Args:
        paths: Selected file paths
        registry: Registry that owns the display handles

    Returns:
        One SourceImage per accepted file, in selection order

    Raises:
        CropValidationError: If no image survives filtering
    """
    paths = list(paths)
    accepted = filter_image_paths(paths)
    if not accepted:
        raise CropValidationError("No image files were selected")

    rejected = len(paths) - len(accepted)
    if rejected:
        logger.info(f"Ignored {rejected} non-image file(s)")

    sources = []
    for path in accepted:
        handle = registry.allocate(path)
        sources.append(SourceImage(path=path, display_handle=handle))

    logger.info(f"Collected {len(sources)} image(s)")
    return sources


def read_natural_size(path: PathLike) -> ImageSize:
    """
    Read an image's pixel dimensions.

    Raises:
        DecodeError: If the file cannot be identified as an image
    """
    try:
        with Image.open(path) as img:
            return img.size
    except Exception as e:
        raise DecodeError(f"Failed to read image size from {path}: {str(e)}") from e
