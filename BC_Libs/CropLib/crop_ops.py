"""
Core crop operations for Batch Crop.

This module provides the per-image steps of a batch run plus the output
naming rules shared by the cropper and the archive exporter.

Functions:
    load_source_image: Decode an image file into an RGBA PIL Image
    crop_to_region: Draw a pixel region onto a surface sized to the region
    encode_png: Encode an image losslessly as PNG bytes
    output_name_for: Derive the archive entry name for a source file
    disambiguate_names: Make a list of output names unique
"""

from io import BytesIO
from pathlib import Path
from typing import Any, Dict, List, Sequence

from PIL import Image

from BC_Libs.constants import DEFAULT_OUTPUT_FORMAT, OUTPUT_FILE_EXTENSION, OUTPUT_FILE_PREFIX
from BC_Libs.CropLib.crop_errors import DecodeError, EncodeError
from BC_Libs.CropLib.crop_models import PixelCropRegion


def load_source_image(path: Path) -> Any:
    """
    Decode an image file fully into memory.

    Args:
        path: Path to the image file

    Returns:
        An RGBA PIL Image detached from the file

    Raises:
        DecodeError: If the file is missing or is not a decodable image
    """
    try:
        with Image.open(path) as img:
            img.load()
            if img.mode != "RGBA":
                return img.convert("RGBA")
            return img.copy()
    except Exception as e:
        raise DecodeError(f"Failed to load image from {path}: {str(e)}") from e


def crop_to_region(image: Any, region: PixelCropRegion) -> Any:
    """
    Crop a pixel region out of an image.

    The output surface is sized exactly to the region. Any part of the
    region outside the image stays fully transparent.

    Args:
        image: A PIL Image
        region: Region in the image's native pixel space

    Returns:
        A new RGBA PIL Image of size region.size
    """
    if image.mode != "RGBA":
        image = image.convert("RGBA")

    left, top, right, bottom = region.box()
    img_width, img_height = image.size

    out_of_bounds = left < 0 or top < 0 or right > img_width or bottom > img_height
    if not out_of_bounds:
        return image.crop((left, top, right, bottom))

    cropped = Image.new("RGBA", (right - left, bottom - top), (0, 0, 0, 0))

    # Overlap between the region and the image
    src_left = max(0, left)
    src_top = max(0, top)
    src_right = min(img_width, right)
    src_bottom = min(img_height, bottom)

    if src_right > src_left and src_bottom > src_top:
        section = image.crop((src_left, src_top, src_right, src_bottom))
        cropped.paste(section, (src_left - left, src_top - top))

    return cropped


def encode_png(image: Any) -> bytes:
    """
    Encode an image as PNG.

    Raises:
        EncodeError: If the image has no pixels or the encoder fails
    """
    if image.width <= 0 or image.height <= 0:
        raise EncodeError(f"Cannot encode an empty {image.width}x{image.height} image")

    buffer = BytesIO()
    try:
        image.save(buffer, format=DEFAULT_OUTPUT_FORMAT)
    except Exception as e:
        raise EncodeError(f"Failed to encode cropped image: {str(e)}") from e
    return buffer.getvalue()


def output_name_for(
    original_name: str,
    prefix: str = OUTPUT_FILE_PREFIX,
    extension: str = OUTPUT_FILE_EXTENSION,
) -> str:
    """
    Derive the output file name for a source file name.

    Only the last extension is stripped. Names without an extension, or
    whose only dot is the leading one, are used whole.

    Examples:
        >>> output_name_for("photo.JPG")
        'cropped_photo.png'
        >>> output_name_for("noext")
        'cropped_noext.png'
        >>> output_name_for("archive.tar.gz")
        'cropped_archive.tar.png'
    """
    dot = original_name.rfind(".")
    stem = original_name[:dot] if dot > 0 else original_name
    return f"{prefix}{stem}{extension}"


def disambiguate_names(names: Sequence[str]) -> List[str]:
    """
    Make output names unique by appending an index to later duplicates.

    The first occurrence keeps its name; the second becomes ``stem_2.ext``,
    the third ``stem_3.ext`` and so on, skipping any name already taken.

    Example:
        >>> disambiguate_names(["cropped_a.png", "cropped_a.png"])
        ['cropped_a.png', 'cropped_a_2.png']
    """
    taken = set()
    seen: Dict[str, int] = {}
    unique: List[str] = []

    for name in names:
        if name not in taken:
            taken.add(name)
            seen.setdefault(name, 1)
            unique.append(name)
            continue

        stem, dot, ext = name.rpartition(".")
        if not dot:
            stem, ext = name, ""
        index = seen.get(name, 1)
        while True:
            index += 1
            candidate = f"{stem}_{index}.{ext}" if dot else f"{stem}_{index}"
            if candidate not in taken:
                break
        seen[name] = index
        taken.add(candidate)
        unique.append(candidate)

    return unique
