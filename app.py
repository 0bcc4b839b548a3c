"""Application entry point."""
from __future__ import annotations

import logging
import sys

from PySide6 import QtWidgets

from faugus.config import ConfigStore
from faugus.errors import FaugusError
from faugus.library import TitleLibrary
from faugus.models import APP_TITLE
from faugus.paths import Paths
from faugus.shortcuts import ShortcutSynchronizer
from ui.main_window import MainWindow


def setup_logging() -> None:
    log_dir = Paths.logs_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(log_dir / "app.log", encoding="utf-8"),
            logging.StreamHandler(),
        ],
    )


def main() -> None:
    setup_logging()
    app = QtWidgets.QApplication(sys.argv)
    try:
        library = TitleLibrary(ConfigStore(), ShortcutSynchronizer())
    except FaugusError as exc:
        logging.getLogger(__name__).error("Could not load configuration: %s", exc)
        QtWidgets.QMessageBox.critical(None, APP_TITLE, str(exc))
        sys.exit(1)
    win = MainWindow(library)
    win.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
