"""
Batch cropping for Batch Crop.

Applies one committed crop rectangle to every source image. The rectangle
is rescaled into the reference image's native pixel space once, then each
source is decoded, cropped and PNG-encoded as an independent unit on a
thread pool. Outcomes are collected positionally so results keep the
original file order.

Classes:
    BatchCropper: Runs a batch with the configured failure policy
"""

import concurrent.futures
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from BC_Libs.constants import DIMENSION_POLICY_STRICT
from BC_Libs.CropLib.crop_errors import BatchCropError, CropError, CropValidationError, DimensionMismatchError
from BC_Libs.CropLib.crop_geometry import scale_region_to_pixels, validate_pixel_region
from BC_Libs.CropLib.crop_models import (
    BatchCropReport,
    CropItemOutcome,
    CropRegion,
    CroppedResult,
    ImageSize,
    PixelCropRegion,
    SourceImage,
)
from BC_Libs.CropLib.crop_ops import crop_to_region, disambiguate_names, encode_png, load_source_image, output_name_for
from BC_Libs.SettingsLib.crop_settings import CropSettings

logger = logging.getLogger(__name__)


class BatchCropper:
    """
    Apply one crop rectangle to many images.

    Example:
        >>> cropper = BatchCropper(CropSettings(all_or_nothing=False))
        >>> report = cropper.crop_all(sources, CropRegion(50, 40, 100, 80),
        ...                           natural_size=(1000, 800), displayed_size=(500, 400))
        >>> [r.output_name for r in report.results]
        ['cropped_a.png', 'cropped_b.png']
    """

    def __init__(self, settings: Optional[CropSettings] = None):
        self.settings = settings or CropSettings()

    def compute_pixel_region(
        self,
        region: CropRegion,
        natural_size: ImageSize,
        displayed_size: Tuple[float, float],
    ) -> PixelCropRegion:
        """Rescale and validate the committed region against the reference image."""
        pixel_region = scale_region_to_pixels(region, natural_size, displayed_size)
        return validate_pixel_region(pixel_region, natural_size)

    def output_names(self, sources: Sequence[SourceImage]) -> List[str]:
        names = [output_name_for(source.name, prefix=self.settings.output_prefix) for source in sources]
        if self.settings.disambiguate_names:
            names = disambiguate_names(names)
        return names

    def crop_all(
        self,
        sources: Sequence[SourceImage],
        region: Optional[CropRegion],
        natural_size: Optional[ImageSize],
        displayed_size: Optional[Tuple[float, float]],
    ) -> BatchCropReport:
        """
        Crop every source with the same pixel-space rectangle.

        Args:
            sources: Images to crop, in display order
            region: Committed rectangle in the reference image's display space
            natural_size: Native (width, height) of the reference image
            displayed_size: Rendered (width, height) of the reference image

        Returns:
            BatchCropReport with one outcome per source, in source order

        Raises:
            CropValidationError: If the region, reference size or sources are missing,
                                 or the region is empty; no image is touched
            BatchCropError: If any image fails while all_or_nothing is enabled
        """
        if region is None:
            raise CropValidationError("Select a crop region first")
        if not sources:
            raise CropValidationError("Load at least one image first")
        if natural_size is None or displayed_size is None:
            raise CropValidationError("The reference image has not been displayed yet")

        pixel_region = self.compute_pixel_region(region, natural_size, displayed_size)
        names = self.output_names(sources)

        logger.info(
            f"Cropping {len(sources)} image(s) with box {pixel_region.box()} "
            f"(reference {natural_size[0]}x{natural_size[1]})"
        )

        outcomes = self._run_units(sources, names, pixel_region, natural_size)
        report = BatchCropReport(outcomes=outcomes, pixel_region=pixel_region)

        for failure in report.failures:
            logger.warning(f"Failed to crop {failure.source.name}: {failure.error}")

        if report.failed and self.settings.all_or_nothing:
            raise BatchCropError(report.failures)

        logger.info(report.summary().splitlines()[0])
        return report

    def _run_units(
        self,
        sources: Sequence[SourceImage],
        names: Sequence[str],
        pixel_region: PixelCropRegion,
        reference_size: ImageSize,
    ) -> List[CropItemOutcome]:
        outcomes: List[Optional[CropItemOutcome]] = [None] * len(sources)

        if self.settings.use_threading and len(sources) > 1:
            with concurrent.futures.ThreadPoolExecutor(max_workers=self.settings.max_workers) as executor:
                futures: Dict[concurrent.futures.Future, int] = {}

                for index, source in enumerate(sources):
                    future = executor.submit(
                        self._crop_one, index, source, names[index], pixel_region, reference_size
                    )
                    futures[future] = index

                for future in concurrent.futures.as_completed(futures):
                    outcomes[futures[future]] = future.result()
        else:
            for index, source in enumerate(sources):
                outcomes[index] = self._crop_one(index, source, names[index], pixel_region, reference_size)

        return outcomes

    def _crop_one(
        self,
        index: int,
        source: SourceImage,
        output_name: str,
        pixel_region: PixelCropRegion,
        reference_size: ImageSize,
    ) -> CropItemOutcome:
        """Decode, crop and encode a single source. Crop errors become a failed outcome."""
        try:
            image = load_source_image(source.path)
            self._check_dimensions(source, image.size, reference_size)
            cropped = crop_to_region(image, pixel_region)
            png_bytes = encode_png(cropped)
        except CropError as e:
            return CropItemOutcome(index=index, source=source, error=e)

        result = CroppedResult(
            original_name=source.name,
            output_name=output_name,
            png_bytes=png_bytes,
            size=cropped.size,
        )
        return CropItemOutcome(index=index, source=source, result=result)

    def _check_dimensions(self, source: SourceImage, size: ImageSize, reference_size: ImageSize) -> None:
        if tuple(size) == tuple(reference_size):
            return

        message = (
            f"{source.name} is {size[0]}x{size[1]} but the reference image is "
            f"{reference_size[0]}x{reference_size[1]}"
        )
        if self.settings.dimension_policy == DIMENSION_POLICY_STRICT:
            raise DimensionMismatchError(message)
        logger.warning(f"{message}; applying the same pixel region anyway")
