"""
Tests for BatchCropWindow.

Tests cover:
- Blocking alerts when crop or download has nothing to work on
- Reference preview loaded through its display handle
- Background crop populating the results strip
- Batch failure reported with an error alert
"""

import pytest
from PyQt5.QtWidgets import QMessageBox

from BC_Libs.CropLib.crop_models import CropRegion
from BC_Libs.CropLib.crop_session import SessionState
from BC_Libs.GuiLib.batch_crop_window import BatchCropWindow
from BC_Libs.SettingsLib.crop_settings import CropSettings


@pytest.fixture
def alerts(monkeypatch):
    """Record message boxes instead of blocking on them."""
    calls = []

    def recorder(kind):
        def show(parent, title, message, *args, **kwargs):
            calls.append((kind, title, message))
            return QMessageBox.Ok
        return show

    for kind in ("information", "warning", "critical"):
        monkeypatch.setattr(QMessageBox, kind, recorder(kind))
    return calls


@pytest.fixture
def window(qtbot, tmp_path, alerts):
    win = BatchCropWindow(CropSettings(use_threading=False), settings_path=tmp_path / "settings.json")
    qtbot.addWidget(win)
    return win


def commit_half_region(window):
    width, height = window.session.displayed_size
    region = CropRegion(0, 0, width / 2, height / 2)
    window.on_region_committed(region)
    return region


class TestAlerts:
    def test_crop_without_images_warns(self, window, alerts):
        window.crop_all_images()

        assert [(kind, title) for kind, title, _ in alerts] == [("warning", "Nothing to Crop")]
        assert not window.is_cropping()

    def test_crop_without_committed_region_warns(self, window, alerts, scenario_images):
        window.load_paths(scenario_images)

        window.crop_all_images()

        assert [(kind, title) for kind, title, _ in alerts] == [("warning", "Nothing to Crop")]
        assert not window.is_cropping()
        assert window.session.state is SessionState.IMAGES_LOADED

    def test_download_without_results_warns(self, window, alerts):
        window.download_all()

        assert [(kind, title) for kind, title, _ in alerts] == [("warning", "Nothing to Download")]

    def test_upload_without_images_warns(self, window, alerts, tmp_path):
        text = tmp_path / "notes.txt"
        text.write_text("x")

        window.load_paths([text])

        assert [(kind, title) for kind, title, _ in alerts] == [("warning", "No Images")]
        assert window.session.state is SessionState.IDLE


class TestUploads:
    def test_reference_preview_resolved_through_handle(self, window, scenario_images, monkeypatch):
        resolved = []
        original = window.session.registry.resolve

        def spy(handle):
            resolved.append(handle)
            return original(handle)

        monkeypatch.setattr(window.session.registry, "resolve", spy)

        window.load_paths(scenario_images)

        assert resolved == [window.session.reference.display_handle]
        assert window.crop_view.has_image()
        assert window.session.displayed_size is not None

    def test_reset_releases_handles(self, window, scenario_images):
        window.load_paths(scenario_images)

        window.reset_all()

        assert window.session.registry.active_count() == 0
        assert not window.crop_view.has_image()


class TestCropAll:
    def test_crop_runs_in_background_and_shows_results(self, qtbot, window, alerts, scenario_images):
        window.load_paths(scenario_images)
        commit_half_region(window)

        with qtbot.waitSignal(window.cropFinished, timeout=10000):
            window.crop_all_images()
            assert window.is_cropping()
            assert window.btn_crop_all.text() == "Cropping..."
            assert not window.btn_reset.isEnabled()

        assert not window.is_cropping()
        assert window.session.state is SessionState.CROPPED
        assert window.results_list.count() == 3
        assert window.results_list.item(0).text() == "cropped_shot_1.png"
        assert window.btn_crop_all.text() == "Crop All Images (3)"
        assert window.btn_download_all.isEnabled()
        assert alerts == []

    def test_batch_failure_shows_error(self, qtbot, window, alerts, image_factory, broken_image):
        window.load_paths([image_factory("a.png"), broken_image])
        commit_half_region(window)

        with qtbot.waitSignal(window.cropFinished, timeout=10000):
            window.crop_all_images()

        assert [(kind, title) for kind, title, _ in alerts] == [("critical", "Crop Failed")]
        assert "broken.png" in alerts[0][2]
        assert window.session.results == []
        assert window.results_list.count() == 0
        assert not window.btn_download_all.isEnabled()

    def test_partial_failure_warns_and_keeps_successes(self, qtbot, tmp_path, alerts, image_factory, broken_image):
        settings = CropSettings(use_threading=False, all_or_nothing=False)
        window = BatchCropWindow(settings, settings_path=tmp_path / "settings.json")
        qtbot.addWidget(window)
        window.load_paths([image_factory("a.png"), broken_image])
        commit_half_region(window)

        with qtbot.waitSignal(window.cropFinished, timeout=10000):
            window.crop_all_images()

        assert [(kind, title) for kind, title, _ in alerts] == [("warning", "Some Images Failed")]
        assert window.results_list.count() == 1
