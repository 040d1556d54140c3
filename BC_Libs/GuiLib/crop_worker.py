"""
Background batch crop for the main window.

CropWorker runs CropSession.crop_all off the GUI thread so the window keeps
repainting while a large batch is decoded, cropped and encoded. The window
must not touch the session until the thread's finished signal arrives.
"""

import logging

from PyQt5.QtCore import QThread, pyqtSignal

from BC_Libs.CropLib.crop_errors import CropError
from BC_Libs.CropLib.crop_session import CropSession

logger = logging.getLogger(__name__)


class CropWorker(QThread):
    """Worker thread that runs one batch crop on a session."""

    succeeded = pyqtSignal(object)  # BatchCropReport
    failed = pyqtSignal(object)  # the raised exception

    def __init__(self, session: CropSession, parent=None) -> None:
        super().__init__(parent)
        self.session = session

    def run(self) -> None:
        try:
            report = self.session.crop_all()
        except CropError as e:
            self.failed.emit(e)
            return
        except Exception as e:
            logger.exception("Unexpected error while cropping images")
            self.failed.emit(e)
            return

        self.succeeded.emit(report)
