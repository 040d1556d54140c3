"""
Batch Crop Pipeline Demo

Runs the whole pipeline without the GUI: generates three images, selects
one region as if drawn on a half-size preview, crops every image and
writes the archive.
"""

import sys
import tempfile
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from PIL import Image, ImageDraw

from BC_Libs.CropLib import CropRegion, CropSession, list_archive_entries
from BC_Libs.logger import setup_logger
from BC_Libs.SettingsLib import CropSettings


def make_sample_images(folder):
    """Create three 1000x800 images with a marker inside the crop area."""
    paths = []
    for index, color in enumerate(["tomato", "seagreen", "steelblue"], start=1):
        image = Image.new("RGB", (1000, 800), "white")
        draw = ImageDraw.Draw(image)
        draw.rectangle((100, 80, 299, 239), fill=color)
        draw.text((120, 100), f"#{index}", fill="black")
        path = folder / f"sample_{index}.jpg"
        image.save(path)
        paths.append(path)
    return paths


def main():
    setup_logger()

    with tempfile.TemporaryDirectory() as temp_dir:
        folder = Path(temp_dir)
        session = CropSession(CropSettings())

        print("=" * 60)
        print("Step 1: Load images")
        print("=" * 60)
        sources = session.load_images(make_sample_images(folder))
        print(f"Loaded {len(sources)} images, default crop: {session.live_region}")

        print("\nStep 2: Select a region on a 500x400 preview")
        session.set_displayed_size(500, 400)
        session.commit_region(CropRegion(x=50, y=40, width=100, height=80))

        print("\nStep 3: Crop all images")
        report = session.crop_all()
        print(f"Pixel region: {report.pixel_region.box()}")
        print(report.summary())

        print("\nStep 4: Save the archive")
        archive_path = session.export_archive(folder)
        for name in list_archive_entries(archive_path.read_bytes()):
            print(f"  {name}")

        session.reset()
        print(f"\nAfter reset: {session.state.value}, "
              f"{session.registry.active_count()} display handles alive")


if __name__ == "__main__":
    main()
