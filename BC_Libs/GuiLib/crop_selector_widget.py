"""
Crop selector widget.

Shows the reference image scaled to fit the widget and lets the user drag
a crop rectangle over it. Dragging outside the current selection starts a
new rectangle; dragging inside it moves the rectangle.

Signals carry CropRegion objects in displayed-image pixels, with the
image's top-left corner as origin:

- regionChanged: every mouse move while dragging (live region)
- regionCommitted: on mouse release (committed region)
- displayedSizeChanged: whenever the rendered image size changes
"""

from typing import Optional, Tuple

from PyQt5.QtCore import QPointF, QRectF, Qt, pyqtSignal
from PyQt5.QtGui import QColor, QPainter, QPen, QPixmap
from PyQt5.QtWidgets import QSizePolicy, QWidget

from BC_Libs.constants import (
    CROP_VIEW_MIN_HEIGHT,
    CROP_VIEW_MIN_WIDTH,
    SELECTION_COLOR,
    SELECTION_SHADE_ALPHA,
    UNIT_PIXELS,
)
from BC_Libs.CropLib.crop_geometry import to_display_pixels
from BC_Libs.CropLib.crop_models import CropRegion


class CropSelectorWidget(QWidget):
    regionChanged = pyqtSignal(object)
    regionCommitted = pyqtSignal(object)
    displayedSizeChanged = pyqtSignal(float, float)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setMinimumSize(CROP_VIEW_MIN_WIDTH, CROP_VIEW_MIN_HEIGHT)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setMouseTracking(False)

        self._pixmap: Optional[QPixmap] = None
        self._placeholder = "Load images to select a crop region"

        # Selection as fractions (0..1) of the displayed image so it survives resizes
        self._selection: Optional[QRectF] = None
        self._drag_origin: Optional[QPointF] = None
        self._drag_start_selection: Optional[QRectF] = None
        self._moving = False

    # ---- image ----
    def set_image(self, pixmap: Optional[QPixmap], placeholder: str = "") -> None:
        self._pixmap = pixmap if pixmap is not None and not pixmap.isNull() else None
        if placeholder:
            self._placeholder = placeholder
        self._selection = None
        self.update()
        self._emit_displayed_size()

    def clear(self) -> None:
        self._pixmap = None
        self._selection = None
        self._placeholder = "Load images to select a crop region"
        self.update()

    def has_image(self) -> bool:
        return self._pixmap is not None

    def image_rect(self) -> QRectF:
        """Rectangle the image is drawn in, centered and scaled to fit (never upscaled)."""
        if self._pixmap is None:
            return QRectF()

        pw, ph = self._pixmap.width(), self._pixmap.height()
        scale = min(self.width() / pw, self.height() / ph, 1.0)
        w, h = pw * scale, ph * scale
        return QRectF((self.width() - w) / 2.0, (self.height() - h) / 2.0, w, h)

    def displayed_size(self) -> Tuple[float, float]:
        rect = self.image_rect()
        return rect.width(), rect.height()

    # ---- region ----
    def set_region(self, region: Optional[CropRegion]) -> None:
        """Show a region given in percent or displayed pixels."""
        if region is None or self._pixmap is None:
            self._selection = None
            self.update()
            return

        width, height = self.displayed_size()
        if width <= 0 or height <= 0:
            return

        px = to_display_pixels(region, (width, height))
        self._selection = QRectF(px.x / width, px.y / height, px.width / width, px.height / height)
        self.update()

    def current_region(self) -> Optional[CropRegion]:
        if self._selection is None or self._pixmap is None:
            return None

        width, height = self.displayed_size()
        sel = self._selection
        return CropRegion(
            x=sel.x() * width,
            y=sel.y() * height,
            width=sel.width() * width,
            height=sel.height() * height,
            unit=UNIT_PIXELS,
        )

    # ---- events ----
    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self._emit_displayed_size()

    def mousePressEvent(self, event) -> None:
        if self._pixmap is None or event.button() != Qt.LeftButton:
            return

        point = self._to_fraction(event.pos())
        self._drag_origin = point
        self._moving = self._selection is not None and self._selection.contains(point)
        if self._moving:
            self._drag_start_selection = QRectF(self._selection)
        else:
            self._selection = QRectF(point, point)
        self._emit_changed()

    def mouseMoveEvent(self, event) -> None:
        if self._drag_origin is None:
            return

        point = self._to_fraction(event.pos())
        if self._moving:
            start = self._drag_start_selection
            dx = point.x() - self._drag_origin.x()
            dy = point.y() - self._drag_origin.y()
            x = min(max(start.x() + dx, 0.0), 1.0 - start.width())
            y = min(max(start.y() + dy, 0.0), 1.0 - start.height())
            self._selection = QRectF(x, y, start.width(), start.height())
        else:
            self._selection = QRectF(self._drag_origin, point).normalized()
        self._emit_changed()

    def mouseReleaseEvent(self, event) -> None:
        if self._drag_origin is None or event.button() != Qt.LeftButton:
            return

        self._drag_origin = None
        self._drag_start_selection = None
        self._moving = False

        region = self.current_region()
        if region is not None:
            self.regionCommitted.emit(region)

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor("#1e1e1e"))

        if self._pixmap is None:
            painter.setPen(QColor("#bbbbbb"))
            painter.drawText(self.rect(), Qt.AlignCenter, self._placeholder)
            return

        target = self.image_rect()
        painter.setRenderHint(QPainter.SmoothPixmapTransform)
        painter.drawPixmap(target, self._pixmap, QRectF(self._pixmap.rect()))

        if self._selection is None:
            return

        sel = QRectF(
            target.x() + self._selection.x() * target.width(),
            target.y() + self._selection.y() * target.height(),
            self._selection.width() * target.width(),
            self._selection.height() * target.height(),
        )

        # Shade everything outside the selection
        shade = QColor(0, 0, 0, SELECTION_SHADE_ALPHA)
        painter.fillRect(QRectF(target.left(), target.top(), target.width(), sel.top() - target.top()), shade)
        painter.fillRect(QRectF(target.left(), sel.bottom(), target.width(), target.bottom() - sel.bottom()), shade)
        painter.fillRect(QRectF(target.left(), sel.top(), sel.left() - target.left(), sel.height()), shade)
        painter.fillRect(QRectF(sel.right(), sel.top(), target.right() - sel.right(), sel.height()), shade)

        pen = QPen(QColor(SELECTION_COLOR))
        pen.setWidth(2)
        pen.setStyle(Qt.DashLine)
        painter.setPen(pen)
        painter.drawRect(sel)

    # ---- helpers ----
    def _to_fraction(self, pos) -> QPointF:
        """Map a widget position to clamped fractions of the displayed image."""
        target = self.image_rect()
        fx = (pos.x() - target.x()) / target.width()
        fy = (pos.y() - target.y()) / target.height()
        return QPointF(min(max(fx, 0.0), 1.0), min(max(fy, 0.0), 1.0))

    def _emit_changed(self) -> None:
        self.update()
        region = self.current_region()
        if region is not None:
            self.regionChanged.emit(region)

    def _emit_displayed_size(self) -> None:
        if self._pixmap is None:
            return
        width, height = self.displayed_size()
        self.displayedSizeChanged.emit(width, height)
