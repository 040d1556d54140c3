import logging
from pathlib import Path
from typing import Iterable, List, Optional

from PyQt5.QtCore import QSize, Qt, pyqtSignal
from PyQt5.QtGui import QIcon, QPixmap
from PyQt5.QtWidgets import (
    QApplication,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QListView,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from BC_Libs.constants import (
    DEFAULT_WINDOW_HEIGHT,
    DEFAULT_WINDOW_WIDTH,
    RESULT_THUMBNAIL_SIZE,
    STANDARD_IMAGE_FILTER,
)
from BC_Libs.CropLib.crop_errors import BatchCropError, CropError, CropValidationError
from BC_Libs.CropLib.crop_models import BatchCropReport, CropRegion
from BC_Libs.CropLib.crop_session import CropSession, SessionState
from BC_Libs.CropLib.upload_collector import is_image_file
from BC_Libs.GuiLib.crop_selector_widget import CropSelectorWidget
from BC_Libs.GuiLib.crop_worker import CropWorker
from BC_Libs.SettingsLib.crop_settings import CropSettings
from BC_Libs.SettingsLib.settings_store import save_settings

logger = logging.getLogger(__name__)


class BatchCropWindow(QMainWindow):
    cropFinished = pyqtSignal()

    def __init__(self, settings: Optional[CropSettings] = None, settings_path: Optional[Path] = None) -> None:
        super().__init__()
        self.setWindowTitle("Batch Crop")
        self.resize(DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT)
        self.setAcceptDrops(True)

        self.settings = settings or CropSettings()
        self.settings_path = settings_path
        self.session = CropSession(self.settings)
        self._crop_worker: Optional[CropWorker] = None

        self._build_ui()
        self._connect_signals()
        self._refresh_controls()

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)

        root = QVBoxLayout(central)
        buttons_row = QHBoxLayout()

        self.btn_select_images = QPushButton("Select Images")
        self.btn_reset = QPushButton("Reset")
        self.btn_crop_all = QPushButton("Crop All Images")
        self.btn_download_all = QPushButton("Download All")

        self.label_status = QLabel("Drop image files here or click Select Images")

        self.crop_view = CropSelectorWidget()

        self.results_list = QListWidget()
        self.results_list.setViewMode(QListView.IconMode)
        self.results_list.setIconSize(QSize(RESULT_THUMBNAIL_SIZE, RESULT_THUMBNAIL_SIZE))
        self.results_list.setResizeMode(QListView.Adjust)
        self.results_list.setMaximumHeight(RESULT_THUMBNAIL_SIZE + 60)

        buttons_row.addWidget(self.btn_select_images)
        buttons_row.addWidget(self.btn_reset)
        buttons_row.addStretch(1)
        buttons_row.addWidget(self.btn_crop_all)
        buttons_row.addWidget(self.btn_download_all)

        root.addLayout(buttons_row)
        root.addWidget(self.label_status)
        root.addWidget(self.crop_view, stretch=1)
        root.addWidget(QLabel("Results"))
        root.addWidget(self.results_list)

    def _connect_signals(self) -> None:
        self.btn_select_images.clicked.connect(self.select_images)
        self.btn_reset.clicked.connect(self.reset_all)
        self.btn_crop_all.clicked.connect(self.crop_all_images)
        self.btn_download_all.clicked.connect(self.download_all)
        self.crop_view.regionChanged.connect(self.on_region_changed)
        self.crop_view.regionCommitted.connect(self.on_region_committed)
        self.crop_view.displayedSizeChanged.connect(self.on_displayed_size_changed)

    # ---- uploads ----
    def select_images(self) -> None:
        file_paths, _ = QFileDialog.getOpenFileNames(
            self,
            "Select Images",
            self.settings.last_directory or "",
            STANDARD_IMAGE_FILTER,
        )
        if not file_paths:
            return

        self._remember_directory(Path(file_paths[0]).parent)
        self.load_paths(Path(p) for p in file_paths)

    def dragEnterEvent(self, event) -> None:
        if not self.is_cropping() and any(is_image_file(path) for path in self._dropped_paths(event)):
            event.acceptProposedAction()
        else:
            event.ignore()

    def dropEvent(self, event) -> None:
        paths = [path for path in self._dropped_paths(event) if is_image_file(path)]
        if not paths:
            event.ignore()
            return
        event.acceptProposedAction()
        self.load_paths(paths)

    def _dropped_paths(self, event) -> List[Path]:
        mime = event.mimeData()
        if not mime.hasUrls():
            return []
        return [Path(url.toLocalFile()) for url in mime.urls() if url.isLocalFile()]

    def load_paths(self, paths: Iterable[Path]) -> None:
        if self.is_cropping():
            return

        try:
            sources = self.session.load_images(paths)
        except CropValidationError as e:
            self._show_warning("No Images", str(e))
            return

        self.results_list.clear()
        reference = sources[0]
        pixmap = QPixmap(str(self.session.registry.resolve(reference.display_handle)))
        if pixmap.isNull():
            logger.warning(f"Could not display reference image {reference.path}")
            self.crop_view.set_image(None, placeholder=f"Could not display {reference.name}")
        else:
            self.crop_view.set_image(pixmap)
            self.crop_view.set_region(self.session.live_region)

        self.label_status.setText(f"{len(sources)} image(s) loaded. Drag on {reference.name} to select a region.")
        self._refresh_controls()

    # ---- crop region ----
    def on_displayed_size_changed(self, width: float, height: float) -> None:
        if self.session.state is SessionState.IDLE or self.is_cropping():
            return
        self.session.set_displayed_size(width, height)

    def on_region_changed(self, region: CropRegion) -> None:
        if self.session.state is SessionState.IDLE:
            return
        self.session.update_region(region)

    def on_region_committed(self, region: CropRegion) -> None:
        if self.session.state is SessionState.IDLE:
            return
        had_results = bool(self.session.results)
        self.session.commit_region(region)
        if had_results:
            self.results_list.clear()
        self.label_status.setText(
            f"Region {region.width:.0f}x{region.height:.0f} at ({region.x:.0f}, {region.y:.0f}) selected"
        )
        self._refresh_controls()

    # ---- batch ----
    def is_cropping(self) -> bool:
        return self._crop_worker is not None

    def crop_all_images(self) -> None:
        if self.is_cropping():
            return
        if not self.session.ready_to_crop:
            self._show_warning("Nothing to Crop", "Select images and a crop region first")
            return

        self.results_list.clear()
        self._set_busy(True)

        worker = CropWorker(self.session, self)
        worker.succeeded.connect(self._on_crop_succeeded)
        worker.failed.connect(self._on_crop_failed)
        worker.finished.connect(self._on_crop_worker_finished)
        self._crop_worker = worker
        worker.start()

    def _on_crop_succeeded(self, report: BatchCropReport) -> None:
        self._populate_results()
        self.label_status.setText(report.summary().splitlines()[0])
        if report.failed:
            self._show_warning("Some Images Failed", report.summary())

    def _on_crop_failed(self, error: Exception) -> None:
        if isinstance(error, CropValidationError):
            self._show_warning("Nothing to Crop", str(error))
            return
        if isinstance(error, BatchCropError):
            logger.error(str(error))
        self._show_error("Crop Failed", f"An error occurred while cropping images:\n{error}")

    def _on_crop_worker_finished(self) -> None:
        worker = self._crop_worker
        self._crop_worker = None
        if worker is not None:
            worker.deleteLater()
        self._set_busy(False)
        if self.crop_view.has_image():
            # Catch up on resizes that happened while the worker held the session
            self.session.set_displayed_size(*self.crop_view.displayed_size())
        self.cropFinished.emit()

    def _set_busy(self, busy: bool) -> None:
        if busy:
            QApplication.setOverrideCursor(Qt.WaitCursor)
            self.btn_crop_all.setText("Cropping...")
            for widget in (self.btn_select_images, self.btn_reset, self.btn_crop_all, self.btn_download_all, self.crop_view):
                widget.setEnabled(False)
        else:
            QApplication.restoreOverrideCursor()
            self.btn_crop_all.setText("Crop All Images")
            self.btn_select_images.setEnabled(True)
            self.crop_view.setEnabled(True)
            self._refresh_controls()

    def _populate_results(self) -> None:
        self.results_list.clear()
        for result in self.session.results:
            pixmap = QPixmap()
            pixmap.loadFromData(self.session.registry.resolve(result.display_handle), "PNG")
            item = QListWidgetItem(QIcon(pixmap), result.output_name)
            item.setToolTip(f"{result.original_name} -> {result.size[0]}x{result.size[1]}")
            self.results_list.addItem(item)

    # ---- export ----
    def download_all(self) -> None:
        if self.is_cropping():
            return
        if not self.session.results:
            self._show_warning("Nothing to Download", "There are no cropped images to download.")
            return

        folder = QFileDialog.getExistingDirectory(
            self, "Select Download Directory", self.settings.last_directory or ""
        )
        if not folder:
            return

        try:
            archive_path = self.session.export_archive(Path(folder))
        except (CropError, OSError, ValueError) as e:
            logger.exception("Archive export failed")
            self._show_error("Download Failed", str(e))
            return

        self._remember_directory(Path(folder))
        self._refresh_controls()
        self._show_info("Success", f"All {len(self.session.results)} images saved to {archive_path}")

    # ---- reset ----
    def reset_all(self) -> None:
        if self.is_cropping():
            return
        self.session.reset()
        self.crop_view.clear()
        self.results_list.clear()
        self.label_status.setText("Drop image files here or click Select Images")
        self._refresh_controls()

    def closeEvent(self, event) -> None:
        if self._crop_worker is not None:
            self._crop_worker.wait()
        super().closeEvent(event)

    def _refresh_controls(self) -> None:
        state = self.session.state
        self.btn_reset.setEnabled(state is not SessionState.IDLE)
        self.btn_crop_all.setEnabled(self.session.committed_region is not None)
        if self.session.sources:
            self.btn_crop_all.setText(f"Crop All Images ({len(self.session.sources)})")
        self.btn_download_all.setEnabled(bool(self.session.results))

    def _remember_directory(self, folder: Path) -> None:
        self.settings.last_directory = str(folder)
        try:
            save_settings(self.settings, self.settings_path)
        except OSError as e:
            logger.warning(f"Could not save settings: {e}")

    def _show_info(self, title: str, message: str) -> None:
        QMessageBox.information(self, title, message)

    def _show_warning(self, title: str, message: str) -> None:
        QMessageBox.warning(self, title, message)

    def _show_error(self, title: str, message: str) -> None:
        QMessageBox.critical(self, title, message)
