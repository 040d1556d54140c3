"""
Tests for CropSelectorWidget.

Tests cover:
- Live region on every drag step, committed region only on release
- Clamping to the displayed image
- Zero-area commit for a click without a drag
- Moving an existing selection
- Percent regions shown in displayed pixels
"""

import pytest
from PyQt5.QtCore import QEvent, QPointF, Qt
from PyQt5.QtGui import QImage, QMouseEvent, QPixmap

from BC_Libs.CropLib.crop_models import CropRegion
from BC_Libs.GuiLib.crop_selector_widget import CropSelectorWidget


def make_pixmap(w, h):
    img = QImage(w, h, QImage.Format_RGB888)
    img.fill(0x445566)
    return QPixmap.fromImage(img)


def press(widget, x, y, button=Qt.LeftButton):
    widget.mousePressEvent(QMouseEvent(QEvent.MouseButtonPress, QPointF(x, y), button, button, Qt.NoModifier))


def move(widget, x, y):
    # Qt5 QTest.mouseMove carries no buttons, so build the drag event by hand
    widget.mouseMoveEvent(QMouseEvent(QEvent.MouseMove, QPointF(x, y), Qt.NoButton, Qt.LeftButton, Qt.NoModifier))


def release(widget, x, y, button=Qt.LeftButton):
    widget.mouseReleaseEvent(QMouseEvent(QEvent.MouseButtonRelease, QPointF(x, y), button, Qt.NoButton, Qt.NoModifier))


def assert_region(region, x, y, width, height):
    assert region.unit == "px"
    assert region.x == pytest.approx(x)
    assert region.y == pytest.approx(y)
    assert region.width == pytest.approx(width)
    assert region.height == pytest.approx(height)


@pytest.fixture
def selector(qtbot):
    """A 640x480 selector showing a 640x480 image at scale 1."""
    widget = CropSelectorWidget()
    qtbot.addWidget(widget)
    widget.resize(640, 480)

    widget.live = []
    widget.committed = []
    widget.regionChanged.connect(widget.live.append)
    widget.regionCommitted.connect(widget.committed.append)

    widget.set_image(make_pixmap(640, 480))
    return widget


class TestDrag:
    def test_live_signal_on_every_move_and_commit_on_release(self, selector):
        press(selector, 64, 48)
        move(selector, 200, 100)
        move(selector, 320, 240)

        assert len(selector.live) == 3
        assert selector.committed == []
        assert_region(selector.live[-1], 64, 48, 256, 192)

        release(selector, 320, 240)

        assert len(selector.committed) == 1
        assert_region(selector.committed[0], 64, 48, 256, 192)

    def test_drag_up_and_left_is_normalized(self, selector):
        press(selector, 320, 240)
        move(selector, 64, 48)
        release(selector, 64, 48)

        assert_region(selector.committed[0], 64, 48, 256, 192)

    def test_drag_is_clamped_to_image(self, selector):
        press(selector, 64, 48)
        move(selector, 2000, -100)
        release(selector, 2000, -100)

        assert_region(selector.committed[0], 64, 0, 576, 48)

    def test_click_without_drag_commits_zero_area(self, selector):
        press(selector, 100, 100)
        release(selector, 100, 100)

        assert len(selector.live) == 1
        assert_region(selector.committed[0], 100, 100, 0, 0)

    def test_move_without_press_is_ignored(self, selector):
        move(selector, 100, 100)
        release(selector, 100, 100)

        assert selector.live == []
        assert selector.committed == []

    def test_right_button_is_ignored(self, selector):
        press(selector, 10, 10, button=Qt.RightButton)
        release(selector, 50, 50, button=Qt.RightButton)

        assert selector.live == []
        assert selector.committed == []

    def test_no_image_no_selection(self, qtbot):
        widget = CropSelectorWidget()
        qtbot.addWidget(widget)
        committed = []
        widget.regionCommitted.connect(committed.append)

        press(widget, 10, 10)
        release(widget, 50, 50)

        assert committed == []
        assert widget.current_region() is None


class TestMoveSelection:
    def test_drag_inside_selection_moves_it(self, selector):
        selector.set_region(CropRegion(100, 100, 200, 100))

        press(selector, 150, 150)
        move(selector, 200, 170)
        release(selector, 200, 170)

        assert_region(selector.committed[0], 150, 120, 200, 100)

    def test_move_is_clamped_to_image(self, selector):
        selector.set_region(CropRegion(25, 25, 50, 50, unit="%"))

        press(selector, 320, 240)
        move(selector, 1320, 240)
        release(selector, 1320, 240)

        assert_region(selector.committed[0], 320, 120, 320, 240)


class TestRegionAndSize:
    def test_percent_region_shown_in_pixels(self, selector):
        selector.set_region(CropRegion(25, 25, 50, 50, unit="%"))

        assert_region(selector.current_region(), 160, 120, 320, 240)

    def test_set_region_does_not_emit(self, selector):
        selector.set_region(CropRegion(10, 10, 20, 20))

        assert selector.live == []
        assert selector.committed == []

    def test_image_is_never_upscaled(self, qtbot):
        widget = CropSelectorWidget()
        qtbot.addWidget(widget)
        widget.resize(800, 600)
        sizes = []
        widget.displayedSizeChanged.connect(lambda w, h: sizes.append((w, h)))
        committed = []
        widget.regionCommitted.connect(committed.append)

        widget.set_image(make_pixmap(400, 300))

        assert widget.displayed_size() == (400, 300)
        assert sizes == [(400, 300)]

        # The image is centered, so its origin sits at (200, 150)
        press(widget, 250, 200)
        release(widget, 250, 200)
        assert_region(committed[0], 50, 50, 0, 0)

    def test_large_image_is_scaled_to_fit(self, qtbot):
        widget = CropSelectorWidget()
        qtbot.addWidget(widget)
        widget.resize(640, 480)

        widget.set_image(make_pixmap(1000, 800))

        assert widget.displayed_size() == pytest.approx((600, 480))

    def test_clear_removes_image_and_selection(self, selector):
        selector.set_region(CropRegion(10, 10, 20, 20))

        selector.clear()

        assert not selector.has_image()
        assert selector.current_region() is None
