"""
Crop rectangle geometry.

Converts crop rectangles between the reference image's display space and
its native pixel space, and derives the initial crop for a new upload.

Functions:
    compute_scale_factors: Native / displayed scale factors per axis
    to_display_pixels: Convert a percent region into display pixels
    scale_region_to_pixels: Rescale a display region into native pixels
    validate_pixel_region: Reject zero-area or out-of-image regions
    make_default_crop: Centered initial crop for a freshly loaded image
    rescale_display_region: Follow a pixel region across a display resize
"""

from typing import Optional, Tuple

from BC_Libs.constants import DEFAULT_CROP_WIDTH_PERCENT, UNIT_PERCENT, UNIT_PIXELS
from BC_Libs.CropLib.crop_errors import CropValidationError
from BC_Libs.CropLib.crop_models import CropRegion, ImageSize, PixelCropRegion


def compute_scale_factors(natural_size: ImageSize, displayed_size: Tuple[float, float]) -> Tuple[float, float]:
    """
    Compute independent X/Y scale factors from display to native pixels.

    Args:
        natural_size: (width, height) of the decoded reference image
        displayed_size: (width, height) the reference image is rendered at

    Returns:
        (scale_x, scale_y) where scale = native / displayed

    Raises:
        CropValidationError: If any dimension is not positive
    """
    natural_width, natural_height = natural_size
    displayed_width, displayed_height = displayed_size

    if displayed_width <= 0 or displayed_height <= 0:
        raise CropValidationError(
            f"Reference image has no displayed size: {displayed_width}x{displayed_height}"
        )
    if natural_width <= 0 or natural_height <= 0:
        raise CropValidationError(
            f"Reference image has no pixels: {natural_width}x{natural_height}"
        )

    return natural_width / displayed_width, natural_height / displayed_height


def to_display_pixels(region: CropRegion, displayed_size: Tuple[float, float]) -> CropRegion:
    """Return the region in display pixels, converting from percent if needed."""
    if region.unit == UNIT_PIXELS:
        return region

    displayed_width, displayed_height = displayed_size
    return CropRegion(
        x=region.x * displayed_width / 100.0,
        y=region.y * displayed_height / 100.0,
        width=region.width * displayed_width / 100.0,
        height=region.height * displayed_height / 100.0,
        unit=UNIT_PIXELS,
    )


def scale_region_to_pixels(
    region: CropRegion,
    natural_size: ImageSize,
    displayed_size: Tuple[float, float],
) -> PixelCropRegion:
    """
    Rescale a display-space region into the reference image's native pixels.

    x and width are multiplied by scale_x; y and height by scale_y.

    Example:
        >>> scale_region_to_pixels(CropRegion(50, 40, 100, 80), (1000, 800), (500, 400))
        PixelCropRegion(x=100.0, y=80.0, width=200.0, height=160.0)
    """
    scale_x, scale_y = compute_scale_factors(natural_size, displayed_size)
    display_region = to_display_pixels(region, displayed_size)

    return PixelCropRegion(
        x=display_region.x * scale_x,
        y=display_region.y * scale_y,
        width=display_region.width * scale_x,
        height=display_region.height * scale_y,
    )


def validate_pixel_region(region: PixelCropRegion, natural_size: ImageSize) -> PixelCropRegion:
    """
    Ensure a pixel region can be cropped from an image of natural_size.

    The region must have a positive area and lie entirely within the
    reference image.

    Raises:
        CropValidationError: If the region has zero area or extends past
                             any edge of the image
    """
    left, top, right, bottom = region.box()
    width, height = natural_size

    if right - left <= 0 or bottom - top <= 0:
        raise CropValidationError(
            f"Crop region is empty: {right - left}x{bottom - top} pixels"
        )

    if left < 0 or top < 0 or right > width or bottom > height:
        raise CropValidationError(
            f"Crop region ({left}, {top}) to ({right}, {bottom}) falls outside "
            f"the {width}x{height} reference image"
        )

    return region


def make_default_crop(
    natural_width: int,
    natural_height: int,
    width_percent: float = DEFAULT_CROP_WIDTH_PERCENT,
    aspect: Optional[float] = None,
) -> CropRegion:
    """
    Build a centered percent crop for a freshly loaded image.

    Without an aspect ratio the crop is aspect-free and its height percent
    equals its width percent. With one, the height is derived so the crop's
    pixel aspect (width / height) equals ``aspect``; if that would exceed
    the image height both sides shrink to fit.

    Args:
        natural_width: Width of the decoded image in pixels
        natural_height: Height of the decoded image in pixels
        width_percent: Crop width as a percent of the image width
        aspect: Optional width / height ratio to lock to

    Returns:
        A CropRegion with unit "%"
    """
    if natural_width <= 0 or natural_height <= 0:
        raise CropValidationError(f"Cannot build a crop for a {natural_width}x{natural_height} image")

    width_percent = max(0.0, min(100.0, float(width_percent)))

    if aspect:
        crop_width_px = natural_width * width_percent / 100.0
        height_percent = (crop_width_px / aspect) / natural_height * 100.0
        if height_percent > 100.0:
            width_percent = width_percent * 100.0 / height_percent
            height_percent = 100.0
    else:
        height_percent = width_percent

    return CropRegion(
        x=(100.0 - width_percent) / 2.0,
        y=(100.0 - height_percent) / 2.0,
        width=width_percent,
        height=height_percent,
        unit=UNIT_PERCENT,
    )


def rescale_display_region(
    region: Optional[CropRegion],
    old_size: Tuple[float, float],
    new_size: Tuple[float, float],
) -> Optional[CropRegion]:
    """
    Move a pixel region from one displayed size to another.

    Percent regions and regions with no previous size are returned unchanged.
    """
    if region is None or region.unit != UNIT_PIXELS:
        return region

    old_width, old_height = old_size
    new_width, new_height = new_size
    if old_width <= 0 or old_height <= 0:
        return region

    fx = new_width / old_width
    fy = new_height / old_height
    return CropRegion(
        x=region.x * fx,
        y=region.y * fy,
        width=region.width * fx,
        height=region.height * fy,
        unit=UNIT_PIXELS,
    )
