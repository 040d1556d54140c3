"""
BC_Libs - Batch Crop Library Modules

This package contains core functionality for the Batch Crop tool,
organized into specialized sub-packages:

- CropLib: Crop models, geometry, batch cropping and archive export
- GuiLib: PyQt5 windows and widgets (crop selector, main window)
- SettingsLib: Settings persistence
"""

__version__ = "0.1.0"
