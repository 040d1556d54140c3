import sys

from PyQt5.QtWidgets import QApplication

from BC_Libs.GuiLib.batch_crop_window import BatchCropWindow
from BC_Libs.logger import setup_logger
from BC_Libs.SettingsLib.settings_store import get_settings_path, load_settings


def main() -> None:
    logger = setup_logger()
    settings_path = get_settings_path()
    settings = load_settings(settings_path)
    logger.info(f"Starting Batch Crop (settings: {settings_path})")

    app = QApplication(sys.argv)
    window = BatchCropWindow(settings, settings_path=settings_path)
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
