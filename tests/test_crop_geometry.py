"""
Unit tests for crop_geometry.

Covers display-to-native scaling, percent regions, region validation,
the default crop and region rescaling on display resize.
"""

import pytest

from BC_Libs.CropLib.crop_errors import CropValidationError
from BC_Libs.CropLib.crop_geometry import (
    compute_scale_factors,
    make_default_crop,
    rescale_display_region,
    scale_region_to_pixels,
    to_display_pixels,
    validate_pixel_region,
)
from BC_Libs.CropLib.crop_models import CropRegion, PixelCropRegion


class TestComputeScaleFactors:
    """Tests for compute_scale_factors."""

    def test_independent_axes(self):
        assert compute_scale_factors((1000, 800), (500, 200)) == (2.0, 4.0)

    def test_identity_when_displayed_at_native_size(self):
        assert compute_scale_factors((640, 480), (640, 480)) == (1.0, 1.0)

    @pytest.mark.parametrize("displayed", [(0, 400), (500, 0), (-1, 10)])
    def test_rejects_non_positive_display(self, displayed):
        with pytest.raises(CropValidationError):
            compute_scale_factors((1000, 800), displayed)


class TestScaleRegionToPixels:
    """Tests for scale_region_to_pixels."""

    def test_reference_scenario(self):
        """1000x800 shown at 500x400 doubles every coordinate."""
        region = CropRegion(x=50, y=40, width=100, height=80)

        pixel = scale_region_to_pixels(region, (1000, 800), (500, 400))

        assert pixel == PixelCropRegion(x=100, y=80, width=200, height=160)
        assert pixel.box() == (100, 80, 300, 240)

    def test_doubling_display_size_halves_pixel_region(self):
        region = CropRegion(x=20, y=10, width=120, height=60)

        small = scale_region_to_pixels(region, (1200, 900), (600, 450))
        large = scale_region_to_pixels(region, (1200, 900), (1200, 900))

        assert large.width == pytest.approx(small.width / 2)
        assert large.height == pytest.approx(small.height / 2)
        assert large.x == pytest.approx(small.x / 2)
        assert large.y == pytest.approx(small.y / 2)

    def test_x_uses_scale_x_and_y_uses_scale_y(self):
        region = CropRegion(x=10, y=10, width=10, height=10)

        pixel = scale_region_to_pixels(region, (300, 100), (100, 100))

        assert (pixel.x, pixel.width) == (30, 30)
        assert (pixel.y, pixel.height) == (10, 10)

    def test_percent_region(self):
        region = CropRegion(x=25, y=25, width=50, height=50, unit="%")

        pixel = scale_region_to_pixels(region, (1000, 800), (500, 400))

        assert pixel.box() == (250, 200, 750, 600)


class TestToDisplayPixels:
    def test_pixel_region_unchanged(self):
        region = CropRegion(1, 2, 3, 4)
        assert to_display_pixels(region, (100, 100)) is region

    def test_percent_region_converted(self):
        region = CropRegion(10, 20, 50, 40, unit="%")

        converted = to_display_pixels(region, (200, 100))

        assert converted == CropRegion(20, 20, 100, 40)


class TestValidatePixelRegion:
    """Tests for validate_pixel_region."""

    def test_accepts_region_inside_image(self):
        region = PixelCropRegion(10, 10, 50, 50)
        assert validate_pixel_region(region, (100, 100)) is region

    def test_accepts_region_touching_edges(self):
        region = PixelCropRegion(0, 0, 100, 100)
        assert validate_pixel_region(region, (100, 100)) is region

    @pytest.mark.parametrize(
        "x,y,width,height",
        [(80, 80, 50, 50), (-5, 10, 20, 20), (10, -5, 20, 20), (90, 10, 20, 20), (10, 90, 20, 20)],
    )
    def test_rejects_region_past_image_edge(self, x, y, width, height):
        with pytest.raises(CropValidationError, match="outside"):
            validate_pixel_region(PixelCropRegion(x, y, width, height), (100, 100))

    @pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (0.2, 40)])
    def test_rejects_zero_area(self, width, height):
        with pytest.raises(CropValidationError, match="empty"):
            validate_pixel_region(PixelCropRegion(10, 10, width, height), (100, 100))

    def test_rejects_region_outside_image(self):
        with pytest.raises(CropValidationError, match="outside"):
            validate_pixel_region(PixelCropRegion(150, 10, 20, 20), (100, 100))


class TestMakeDefaultCrop:
    """Tests for make_default_crop."""

    def test_centered_half_width_without_aspect(self):
        region = make_default_crop(1000, 800)

        assert region.unit == "%"
        assert region.width == 50
        assert region.height == 50
        assert region.x == 25
        assert region.y == 25

    def test_aspect_locked(self):
        region = make_default_crop(1000, 500, aspect=1.0)

        # 500px wide square on a 500px tall image is the full height
        assert region.width == pytest.approx(50)
        assert region.height == pytest.approx(100)
        assert region.y == pytest.approx(0)

    def test_aspect_that_overflows_height_shrinks(self):
        region = make_default_crop(1000, 200, aspect=1.0)

        assert region.height == pytest.approx(100)
        assert region.width == pytest.approx(20)
        assert region.x == pytest.approx(40)

    def test_rejects_empty_image(self):
        with pytest.raises(CropValidationError):
            make_default_crop(0, 100)


class TestRescaleDisplayRegion:
    def test_follows_resize(self):
        region = CropRegion(50, 40, 100, 80)

        rescaled = rescale_display_region(region, (500, 400), (250, 200))

        assert rescaled == CropRegion(25, 20, 50, 40)

    def test_same_native_region_after_resize(self):
        region = CropRegion(50, 40, 100, 80)
        rescaled = rescale_display_region(region, (500, 400), (1000, 800))

        before = scale_region_to_pixels(region, (1000, 800), (500, 400))
        after = scale_region_to_pixels(rescaled, (1000, 800), (1000, 800))

        assert before.box() == after.box()

    def test_percent_and_missing_regions_unchanged(self):
        percent = CropRegion(10, 10, 10, 10, unit="%")
        assert rescale_display_region(percent, (100, 100), (50, 50)) is percent
        assert rescale_display_region(None, (100, 100), (50, 50)) is None
