"""
Crop data models for Batch Crop.

This module defines core data structures used throughout the crop pipeline.

Classes:
    CropRegion: Rectangle in the reference image's display coordinate space
    PixelCropRegion: Rectangle in the reference image's native pixel space
    SourceImage: An uploaded image file and its display handle
    CroppedResult: The encoded crop of one source image
    CropItemOutcome: Success or failure of one source within a batch
    BatchCropReport: Ordered outcomes of a batch run

Type Aliases:
    ImageSize: A (width, height) tuple
"""

from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image

from BC_Libs.constants import SUPPORTED_UNITS, UNIT_PIXELS

ImageSize = Tuple[int, int]
Box = Tuple[int, int, int, int]


@dataclass(frozen=True)
class CropRegion:
    """Crop rectangle in display coordinates.

    Attributes:
        x: Left edge
        y: Top edge
        width: Rectangle width
        height: Rectangle height
        unit: "px" for rendered pixels, "%" for percent of the rendered size
    """
    x: float
    y: float
    width: float
    height: float
    unit: str = UNIT_PIXELS

    def __post_init__(self):
        if self.unit not in SUPPORTED_UNITS:
            raise ValueError(f"Unsupported crop unit: {self.unit}")

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class PixelCropRegion:
    """Crop rectangle in the reference image's native pixel space."""
    x: float
    y: float
    width: float
    height: float

    def box(self) -> Box:
        """Integer (left, top, right, bottom) box, edges rounded to the nearest pixel."""
        left = int(round(self.x))
        top = int(round(self.y))
        right = int(round(self.x + self.width))
        bottom = int(round(self.y + self.height))
        return left, top, right, bottom

    @property
    def size(self) -> ImageSize:
        left, top, right, bottom = self.box()
        return right - left, bottom - top


@dataclass
class SourceImage:
    path: Path
    display_handle: Optional[str] = None

    def __post_init__(self):
        self.path = Path(self.path)

    @property
    def name(self) -> str:
        return self.path.name


@dataclass
class CroppedResult:
    """Encoded crop of one source image.

    Attributes:
        original_name: File name of the source image
        output_name: Archive entry name (e.g. "cropped_photo.png")
        png_bytes: Lossless PNG encoding of the cropped raster
        size: (width, height) of the cropped raster
        display_handle: Handle for previewing the result, if allocated
    """
    original_name: str
    output_name: str
    png_bytes: bytes = field(repr=False)
    size: ImageSize = (0, 0)
    display_handle: Optional[str] = None

    def to_image(self) -> "Image.Image":
        """Decode the PNG bytes back into a PIL Image."""
        image = Image.open(BytesIO(self.png_bytes))
        image.load()
        return image


@dataclass
class CropItemOutcome:
    index: int
    source: SourceImage
    result: Optional[CroppedResult] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.result is not None


@dataclass
class BatchCropReport:
    """Outcomes of a batch run, in source order."""
    outcomes: List[CropItemOutcome]
    pixel_region: PixelCropRegion

    @property
    def results(self) -> List[CroppedResult]:
        return [outcome.result for outcome in self.outcomes if outcome.ok]

    @property
    def failures(self) -> List[CropItemOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    @property
    def succeeded(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> int:
        return len(self.failures)

    def summary(self) -> str:
        lines = [f"Cropped {self.succeeded} of {len(self.outcomes)} images"]
        for outcome in self.failures:
            lines.append(f"  {outcome.source.name}: {outcome.error}")
        return "\n".join(lines)
