"""Main window for the launcher UI."""
from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6 import QtCore, QtWidgets

from faugus.errors import FaugusError
from faugus.launch import launch_title
from faugus.library import TitleLibrary
from faugus.models import APP_TITLE, Game
from faugus.wine_tools import WINECFG, WINETRICKS, run_prefix_tool
from ui.dialogs import GameDialog

LOGGER = logging.getLogger(__name__)


class _Task(QtCore.QRunnable):
    """Runs blocking file work off the UI thread."""

    def __init__(self, fn: Callable[[], object], done: "TaskSignals"):
        super().__init__()
        self.fn = fn
        self.done = done

    def run(self) -> None:
        try:
            self.fn()
        except (FaugusError, KeyError, ValueError, OSError) as exc:
            self.done.failed.emit(str(exc))
        else:
            self.done.finished.emit()


class TaskSignals(QtCore.QObject):
    finished = QtCore.Signal()
    failed = QtCore.Signal(str)


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, library: TitleLibrary) -> None:
        super().__init__()
        self.setWindowTitle(APP_TITLE)
        self.resize(720, 520)
        self.library = library
        self.pool = QtCore.QThreadPool.globalInstance()
        self.signals = TaskSignals()
        self.signals.failed.connect(self.on_task_failed)
        self.signals.finished.connect(self.refresh_list)

        self.search_edit = QtWidgets.QLineEdit()
        self.search_edit.setPlaceholderText("Search")
        self.search_edit.textChanged.connect(self.refresh_list)

        self.list = QtWidgets.QListWidget()
        self.list.itemDoubleClicked.connect(lambda _item: self.on_launch())

        buttons = QtWidgets.QHBoxLayout()
        for label, slot in (
            ("Play", self.on_launch),
            ("Add", self.add_entry),
            ("Edit", self.on_edit),
            ("Duplicate", self.on_duplicate),
            ("Remove", self.on_delete),
            ("Winecfg", lambda: self.on_prefix_tool(WINECFG)),
            ("Winetricks", lambda: self.on_prefix_tool(WINETRICKS)),
        ):
            btn = QtWidgets.QPushButton(label)
            btn.clicked.connect(slot)
            buttons.addWidget(btn)

        central = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(central)
        layout.addWidget(self.search_edit)
        layout.addWidget(self.list, 1)
        layout.addLayout(buttons)
        self.setCentralWidget(central)

        self.refresh_list()

    def refresh_list(self) -> None:
        query = self.search_edit.text().strip().lower()
        self.list.clear()
        for game in self.library.visible():
            if query and query not in game.title.lower():
                continue
            item = QtWidgets.QListWidgetItem(game.title)
            item.setData(QtCore.Qt.UserRole, game.gameid)
            self.list.addItem(item)

    def selected_game(self) -> Optional[Game]:
        item = self.list.currentItem()
        if item is None:
            return None
        return self.library.by_id(item.data(QtCore.Qt.UserRole))

    def _in_background(self, fn: Callable[[], object]) -> None:
        self.pool.start(_Task(fn, self.signals))

    def on_task_failed(self, message: str) -> None:
        self.refresh_list()
        QtWidgets.QMessageBox.warning(self, APP_TITLE, message)

    def add_entry(self) -> None:
        dlg = GameDialog(self.library.settings, self)
        if dlg.exec():
            game = dlg.get_value()
            if game:
                self._in_background(lambda: self.library.add(game))

    def on_edit(self) -> None:
        game = self.selected_game()
        if not game:
            return
        dlg = GameDialog(self.library.settings, self, game)
        if dlg.exec():
            updated = dlg.get_value()
            if updated:
                self._in_background(lambda: self.library.update(updated))

    def on_duplicate(self) -> None:
        game = self.selected_game()
        if game:
            self._in_background(lambda: self.library.duplicate(game.gameid))

    def on_delete(self) -> None:
        game = self.selected_game()
        if not game:
            return
        answer = QtWidgets.QMessageBox.question(self, APP_TITLE, f"Remove '{game.title}'?")
        if answer == QtWidgets.QMessageBox.Yes:
            self._in_background(lambda: self.library.remove(game.gameid))

    def on_launch(self) -> None:
        game = self.selected_game()
        if not game:
            return
        try:
            launch_title(game.gameid, self.library.store)
        except FaugusError as exc:
            LOGGER.error("Launch of %s failed: %s", game.title, exc)
            QtWidgets.QMessageBox.warning(self, APP_TITLE, str(exc))
            return
        if self.library.settings.close_on_launch:
            self.close()

    def on_prefix_tool(self, tool: str) -> None:
        game = self.selected_game()
        try:
            run_prefix_tool(tool, game, self.library.store)
        except FaugusError as exc:
            LOGGER.error("%s failed: %s", tool, exc)
            QtWidgets.QMessageBox.warning(self, APP_TITLE, str(exc))
