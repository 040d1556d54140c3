"""
Exception types raised by the crop pipeline.

Each error also derives from the builtin exception a caller would
naturally catch for that failure (ValueError for bad input, IOError for
unreadable images, OSError for encoding problems).
"""

from typing import Any, List


class CropError(Exception):
    """Base class for all Batch Crop errors."""


class CropValidationError(CropError, ValueError):
    """Raised when an operation is requested without valid inputs."""


class DecodeError(CropError, IOError):
    """Raised when a source image cannot be decoded."""


class EncodeError(CropError, OSError):
    """Raised when a cropped raster cannot be encoded."""


class DimensionMismatchError(CropError, ValueError):
    """Raised when a source image differs in size from the reference image."""


class InvalidTransitionError(CropError, RuntimeError):
    """Raised when a session operation is not allowed in the current state."""


class BatchCropError(CropError):
    """Raised when one or more images of a batch fail to crop.

    Attributes:
        failures: The failed CropItemOutcome objects, in source order
    """

    def __init__(self, failures: List[Any]):
        self.failures = list(failures)
        details = "; ".join(f"{item.source.name}: {item.error}" for item in self.failures)
        super().__init__(f"{len(self.failures)} image(s) failed to crop: {details}")
