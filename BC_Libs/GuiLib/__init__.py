"""
GuiLib - PyQt5 user interface

This module provides the main window, the interactive crop selector and
the background crop worker.
"""

from BC_Libs.GuiLib.crop_selector_widget import CropSelectorWidget
from BC_Libs.GuiLib.crop_worker import CropWorker
from BC_Libs.GuiLib.batch_crop_window import BatchCropWindow

__all__ = [
    "CropSelectorWidget",
    "CropWorker",
    "BatchCropWindow",
]
