"""
Crop session state for Batch Crop.

CropSession owns everything the window shows: the uploaded sources, the
live and committed crop regions, and the cropped results. Operations move
the session through

    IDLE -> IMAGES_LOADED -> REGION_SELECTED -> CROPPED -> ARCHIVED

and check the current state before doing anything. Display handles for
sources and results are revoked whenever the session discards them.

Classes:
    SessionState: The session's states
    CropSession: Session state object with validated transitions
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from BC_Libs.CropLib.archive_exporter import build_archive, export_archive
from BC_Libs.CropLib.batch_cropper import BatchCropper
from BC_Libs.CropLib.crop_errors import (
    BatchCropError,
    CropValidationError,
    DecodeError,
    InvalidTransitionError,
)
from BC_Libs.CropLib.crop_geometry import make_default_crop, rescale_display_region
from BC_Libs.CropLib.crop_models import BatchCropReport, CropRegion, CroppedResult, ImageSize, SourceImage
from BC_Libs.CropLib.display_handles import DisplayHandleRegistry
from BC_Libs.CropLib.upload_collector import PathLike, collect_uploads, read_natural_size
from BC_Libs.SettingsLib.crop_settings import CropSettings

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = "idle"
    IMAGES_LOADED = "images_loaded"
    REGION_SELECTED = "region_selected"
    CROPPED = "cropped"
    ARCHIVED = "archived"


_LOADED_STATES = (
    SessionState.IMAGES_LOADED,
    SessionState.REGION_SELECTED,
    SessionState.CROPPED,
    SessionState.ARCHIVED,
)
_COMMITTED_STATES = (
    SessionState.REGION_SELECTED,
    SessionState.CROPPED,
    SessionState.ARCHIVED,
)


class CropSession:
    """
    Explicit state object for one batch-crop workflow.

    Example:
        >>> session = CropSession()
        >>> session.load_images(["a.png", "b.png"])
        >>> session.set_displayed_size(500, 400)
        >>> session.commit_region(CropRegion(50, 40, 100, 80))
        >>> report = session.crop_all()
        >>> session.export_archive(Path("/tmp"))
        PosixPath('/tmp/cropped-images.zip')
    """

    def __init__(
        self,
        settings: Optional[CropSettings] = None,
        registry: Optional[DisplayHandleRegistry] = None,
        cropper: Optional[BatchCropper] = None,
    ):
        self.settings = settings or CropSettings()
        self.registry = registry or DisplayHandleRegistry()
        self.cropper = cropper or BatchCropper(self.settings)

        self.state = SessionState.IDLE
        self.sources: List[SourceImage] = []
        self.natural_size: Optional[ImageSize] = None
        self.displayed_size: Optional[Tuple[float, float]] = None
        self.live_region: Optional[CropRegion] = None
        self.committed_region: Optional[CropRegion] = None
        self.results: List[CroppedResult] = []
        self.last_report: Optional[BatchCropReport] = None
        self.archive_path: Optional[Path] = None

    @property
    def reference(self) -> Optional[SourceImage]:
        return self.sources[0] if self.sources else None

    @property
    def ready_to_crop(self) -> bool:
        """True once images are loaded and a region has been committed."""
        return self.state in _COMMITTED_STATES and self.committed_region is not None

    def _require(self, allowed: Iterable[SessionState], action: str) -> None:
        if self.state not in tuple(allowed):
            raise InvalidTransitionError(f"Cannot {action} while the session is {self.state.value}")

    def _set_state(self, state: SessionState) -> None:
        if state is not self.state:
            logger.debug(f"Session {self.state.value} -> {state.value}")
        self.state = state

    def _discard_results(self) -> None:
        self.registry.revoke_many(result.display_handle for result in self.results)
        self.results = []
        self.last_report = None
        self.archive_path = None

    def _discard_sources(self) -> None:
        self.registry.revoke_many(source.display_handle for source in self.sources)
        self.sources = []
        self.natural_size = None
        self.displayed_size = None
        self.live_region = None
        self.committed_region = None

    def load_images(self, paths: Iterable[PathLike]) -> List[SourceImage]:
        """
        Replace the current upload set with a new one.

        Allowed from any state. Prior sources, regions and results are
        discarded. The first image becomes the reference; its size seeds a
        centered default crop as the live region. If the reference cannot be
        decoded the session still loads, without a default crop.

        Raises:
            CropValidationError: If no image files are among paths; the
                                 current session is left untouched
        """
        sources = collect_uploads(paths, self.registry)

        self._discard_results()
        self._discard_sources()
        self.sources = sources

        try:
            self.natural_size = read_natural_size(sources[0].path)
        except DecodeError as e:
            logger.warning(f"No default crop: {e}")
        else:
            self.live_region = make_default_crop(
                *self.natural_size, width_percent=self.settings.default_crop_percent
            )

        self._set_state(SessionState.IMAGES_LOADED)
        return sources

    def set_displayed_size(self, width: float, height: float) -> None:
        """
        Record the size the reference image is rendered at.

        Pixel regions already stored follow the new size, so the native
        rectangle they describe does not change.
        """
        self._require(_LOADED_STATES, "set the displayed size")
        new_size = (width, height)
        old_size = self.displayed_size
        self.displayed_size = new_size

        if old_size is not None and old_size != new_size:
            self.live_region = rescale_display_region(self.live_region, old_size, new_size)
            self.committed_region = rescale_display_region(self.committed_region, old_size, new_size)

    def update_region(self, region: CropRegion) -> None:
        """Track the in-progress region while the user drags."""
        self._require(_LOADED_STATES, "update the crop region")
        self.live_region = region

    def commit_region(self, region: Optional[CropRegion] = None) -> CropRegion:
        """
        Commit a region (or the live region) for cropping.

        Committing after a batch discards its results.

        Raises:
            CropValidationError: If no region is given and none is live
        """
        self._require(_LOADED_STATES, "commit a crop region")
        region = region if region is not None else self.live_region
        if region is None:
            raise CropValidationError("Select a crop region first")

        self._discard_results()
        self.live_region = region
        self.committed_region = region
        self._set_state(SessionState.REGION_SELECTED)
        return region

    def crop_all(self) -> BatchCropReport:
        """
        Apply the committed region to every source.

        Returns:
            The batch report; its successful results are kept on the session

        Raises:
            CropValidationError: If images or a committed region are missing
            DecodeError: If the reference image size cannot be read
            BatchCropError: If any image fails while all_or_nothing is enabled
        """
        if not self.ready_to_crop:
            raise CropValidationError("Select images and a crop region first")

        if self.natural_size is None:
            self.natural_size = read_natural_size(self.sources[0].path)

        self._discard_results()
        self._set_state(SessionState.REGION_SELECTED)

        try:
            report = self.cropper.crop_all(
                self.sources, self.committed_region, self.natural_size, self.displayed_size
            )
        except BatchCropError:
            logger.error("Batch crop failed; no results kept")
            raise

        for result in report.results:
            result.display_handle = self.registry.allocate(result.png_bytes)

        self.results = report.results
        self.last_report = report
        if self.results:
            self._set_state(SessionState.CROPPED)
        return report

    def build_archive(self) -> bytes:
        """Build the results archive in memory without changing state."""
        if not self.results:
            raise CropValidationError("There are no cropped images to download")
        return build_archive(self.results)

    def export_archive(self, output_dir: Path) -> Path:
        """
        Write the results archive into output_dir.

        Raises:
            CropValidationError: If there are no results
            OSError: If output_dir is not a writable directory
        """
        if not self.results:
            raise CropValidationError("There are no cropped images to download")

        self.archive_path = export_archive(
            self.results, Path(output_dir), archive_name=self.settings.archive_name
        )
        self._set_state(SessionState.ARCHIVED)
        return self.archive_path

    def reset(self) -> None:
        """Discard sources, regions and results and return to IDLE."""
        self._discard_results()
        self._discard_sources()
        self._set_state(SessionState.IDLE)
        logger.info("Session reset")
