"""
Runtime settings for Batch Crop.

Classes:
    CropSettings: Settings for batch cropping and archive export
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from BC_Libs.constants import (
    ARCHIVE_NAME,
    DEFAULT_CROP_WIDTH_PERCENT,
    DIMENSION_POLICY_WARN,
    OUTPUT_FILE_PREFIX,
    SUPPORTED_DIMENSION_POLICIES,
)


@dataclass
class CropSettings:
    """Configuration for batch cropping.

    Attributes:
        archive_name: File name of the exported archive (default: cropped-images.zip)
        output_prefix: Prefix of every archive entry name (default: cropped_)
        use_threading: Crop images concurrently on a thread pool (default: True)
        max_workers: Maximum number of threads (default: None = executor default)
        all_or_nothing: Discard every result when any image fails (default: True)
        disambiguate_names: Suffix duplicate entry names with an index (default: True)
        dimension_policy: "warn" logs sources whose size differs from the
                          reference image, "strict" fails them (default: warn)
        default_crop_percent: Width of the initial centered crop in percent (default: 50)
        last_directory: Directory last used in a file dialog
    """
    archive_name: str = ARCHIVE_NAME
    output_prefix: str = OUTPUT_FILE_PREFIX
    use_threading: bool = True
    max_workers: Optional[int] = None
    all_or_nothing: bool = True
    disambiguate_names: bool = True
    dimension_policy: str = DIMENSION_POLICY_WARN
    default_crop_percent: float = DEFAULT_CROP_WIDTH_PERCENT
    last_directory: Optional[str] = None

    def __post_init__(self):
        """Validate settings values."""
        if not str(self.archive_name).strip():
            raise ValueError("archive_name cannot be empty")

        if self.dimension_policy not in SUPPORTED_DIMENSION_POLICIES:
            raise ValueError(
                f"dimension_policy must be one of {sorted(SUPPORTED_DIMENSION_POLICIES)}, "
                f"got {self.dimension_policy!r}"
            )

        if self.max_workers is not None and int(self.max_workers) < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

        if not 0 < float(self.default_crop_percent) <= 100:
            raise ValueError(
                f"default_crop_percent must be in (0, 100], got {self.default_crop_percent}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CropSettings":
        """Create from dictionary, ignoring unknown keys."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)
