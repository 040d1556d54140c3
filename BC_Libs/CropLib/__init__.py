"""
CropLib - Core batch crop functionality

This module provides the crop models, geometry, per-image operations,
batch cropper, archive exporter and the session state object that ties
them together.
"""

from BC_Libs.CropLib.crop_errors import (
    BatchCropError,
    CropError,
    CropValidationError,
    DecodeError,
    DimensionMismatchError,
    EncodeError,
    InvalidTransitionError,
)
from BC_Libs.CropLib.crop_models import (
    BatchCropReport,
    CropItemOutcome,
    CropRegion,
    CroppedResult,
    PixelCropRegion,
    SourceImage,
)
from BC_Libs.CropLib.crop_geometry import (
    compute_scale_factors,
    make_default_crop,
    rescale_display_region,
    scale_region_to_pixels,
    to_display_pixels,
    validate_pixel_region,
)
from BC_Libs.CropLib.crop_ops import (
    crop_to_region,
    disambiguate_names,
    encode_png,
    load_source_image,
    output_name_for,
)
from BC_Libs.CropLib.display_handles import DisplayHandleRegistry
from BC_Libs.CropLib.upload_collector import (
    collect_uploads,
    filter_image_paths,
    is_image_file,
    read_natural_size,
)
from BC_Libs.CropLib.batch_cropper import BatchCropper
from BC_Libs.CropLib.archive_exporter import build_archive, export_archive, list_archive_entries
from BC_Libs.CropLib.crop_session import CropSession, SessionState

__all__ = [
    "BatchCropError",
    "CropError",
    "CropValidationError",
    "DecodeError",
    "DimensionMismatchError",
    "EncodeError",
    "InvalidTransitionError",
    "BatchCropReport",
    "CropItemOutcome",
    "CropRegion",
    "CroppedResult",
    "PixelCropRegion",
    "SourceImage",
    "compute_scale_factors",
    "make_default_crop",
    "rescale_display_region",
    "scale_region_to_pixels",
    "to_display_pixels",
    "validate_pixel_region",
    "crop_to_region",
    "disambiguate_names",
    "encode_png",
    "load_source_image",
    "output_name_for",
    "DisplayHandleRegistry",
    "collect_uploads",
    "filter_image_paths",
    "is_image_file",
    "read_natural_size",
    "BatchCropper",
    "build_archive",
    "export_archive",
    "list_archive_entries",
    "CropSession",
    "SessionState",
]
