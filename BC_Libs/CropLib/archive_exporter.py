"""
Archive export for Batch Crop.

Bundles cropped results into a single zip archive. Entries are stored
uncompressed since PNG data is already compressed.

Functions:
    build_archive: Build the zip archive in memory
    export_archive: Write the zip archive into a directory
    list_archive_entries: List entry names of a zip archive
"""

import logging
import zipfile
from io import BytesIO
from pathlib import Path
from typing import List, Sequence

from BC_Libs.constants import ARCHIVE_NAME
from BC_Libs.CropLib.crop_errors import CropValidationError
from BC_Libs.CropLib.crop_models import CroppedResult

logger = logging.getLogger(__name__)


def build_archive(results: Sequence[CroppedResult]) -> bytes:
    """
    Build a zip archive with one PNG entry per result.

    Args:
        results: Cropped results, in the order entries should appear

    Returns:
        The archive as bytes

    Raises:
        CropValidationError: If there are no results
        ValueError: If two results share an output name
    """
    if not results:
        raise CropValidationError("There are no cropped images to download")

    names = [result.output_name for result in results]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ValueError(f"Duplicate archive entry names: {', '.join(duplicates)}")

    buffer = BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_STORED) as archive:
        for result in results:
            archive.writestr(result.output_name, result.png_bytes)

    return buffer.getvalue()


def export_archive(
    results: Sequence[CroppedResult],
    output_dir: Path,
    archive_name: str = ARCHIVE_NAME,
    overwrite: bool = True,
) -> Path:
    """
    Write the archive of all results into output_dir.

    Args:
        results: Cropped results to bundle
        output_dir: Existing directory to write into
        archive_name: Archive file name (default: cropped-images.zip)
        overwrite: Replace an existing archive of the same name (default: True)

    Returns:
        Path of the written archive

    Raises:
        CropValidationError: If there are no results
        OSError: If output_dir is missing or not a directory
        ValueError: If the archive exists and overwrite is False
    """
    output_dir = Path(output_dir)
    if not output_dir.exists():
        raise OSError(f"Output directory does not exist: {output_dir}")

    if not output_dir.is_dir():
        raise OSError(f"Output path is not a directory: {output_dir}")

    archive_path = output_dir / archive_name
    if archive_path.exists() and not overwrite:
        raise ValueError(
            f"Archive already exists: {archive_path}. "
            f"Set overwrite=True to replace."
        )

    data = build_archive(results)
    archive_path.write_bytes(data)
    logger.info(f"Wrote {len(results)} image(s) to {archive_path}")
    return archive_path


def list_archive_entries(data: bytes) -> List[str]:
    """Return the entry names of an in-memory zip archive."""
    with zipfile.ZipFile(BytesIO(data)) as archive:
        return archive.namelist()
