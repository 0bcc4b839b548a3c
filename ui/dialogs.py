"""Dialog windows used in the launcher."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

from PySide6 import QtWidgets

from faugus.models import APP_TITLE, ENV_KEY_RE, Game, GlobalSettings, format_title, new_game_id

_TRISTATE = [("Default", None), ("On", True), ("Off", False)]


def _tristate_combo(value: Optional[bool]) -> QtWidgets.QComboBox:
    combo = QtWidgets.QComboBox()
    for label, data in _TRISTATE:
        combo.addItem(label, data)
    combo.setCurrentIndex([data for _, data in _TRISTATE].index(value))
    return combo


class GameDialog(QtWidgets.QDialog):
    def __init__(
        self,
        settings: GlobalSettings,
        parent: Optional[QtWidgets.QWidget] = None,
        entry: Optional[Game] = None,
    ):
        super().__init__(parent)
        self.setWindowTitle("Edit game" if entry else "Add game")
        self.setModal(True)
        self.resize(620, 520)
        self.entry = entry
        self.settings = settings

        form = QtWidgets.QFormLayout()
        self.title_edit = QtWidgets.QLineEdit()
        self.path_edit = QtWidgets.QLineEdit()
        self.prefix_edit = QtWidgets.QLineEdit()
        self.runner_edit = QtWidgets.QLineEdit()
        self.runner_edit.setPlaceholderText(settings.default_runner)
        self.protonfix_edit = QtWidgets.QLineEdit()
        self.launch_args_edit = QtWidgets.QLineEdit()
        self.game_args_edit = QtWidgets.QLineEdit()
        self.envars_edit = QtWidgets.QPlainTextEdit()
        self.envars_edit.setPlaceholderText("KEY=value, one per line")
        self.mangohud_chk = QtWidgets.QCheckBox("MangoHud")
        self.gamemode_chk = QtWidgets.QCheckBox("GameMode")
        self.hidraw_chk = QtWidgets.QCheckBox("Disable hidraw")
        self.steam_chk = QtWidgets.QCheckBox("Steam shortcut")
        self.wayland_combo = _tristate_combo(entry.wayland_driver if entry else None)
        self.hdr_combo = _tristate_combo(entry.enable_hdr if entry else None)
        self.wow64_combo = _tristate_combo(entry.enable_wow64 if entry else None)
        self.lossless_combo = _tristate_combo(entry.lossless_enabled if entry else None)

        def row_with_browse(line_edit: QtWidgets.QLineEdit, caption: str, directory: bool = False) -> QtWidgets.QWidget:
            btn = QtWidgets.QPushButton("Browse…")
            layout = QtWidgets.QHBoxLayout()
            layout.setContentsMargins(0, 0, 0, 0)
            layout.addWidget(line_edit)
            layout.addWidget(btn)
            container = QtWidgets.QWidget()
            container.setLayout(layout)
            if directory:
                btn.clicked.connect(lambda: self._browse_dir(line_edit, caption))
            else:
                btn.clicked.connect(lambda: self._browse_file(line_edit, caption))
            return container

        form.addRow("Title", self.title_edit)
        form.addRow("Executable", row_with_browse(self.path_edit, "Executable"))
        form.addRow("Prefix", row_with_browse(self.prefix_edit, "Prefix", directory=True))
        form.addRow("Runner", self.runner_edit)
        form.addRow("Protonfix", self.protonfix_edit)
        form.addRow("Launch arguments", self.launch_args_edit)
        form.addRow("Game arguments", self.game_args_edit)
        form.addRow("Environment", self.envars_edit)
        form.addRow("Wayland", self.wayland_combo)
        form.addRow("HDR", self.hdr_combo)
        form.addRow("WOW64", self.wow64_combo)
        form.addRow("Frame generation", self.lossless_combo)
        for chk in (self.mangohud_chk, self.gamemode_chk, self.hidraw_chk, self.steam_chk):
            form.addRow("", chk)

        btn_box = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel)
        btn_box.accepted.connect(self.accept)
        btn_box.rejected.connect(self.reject)

        layout = QtWidgets.QVBoxLayout(self)
        layout.addLayout(form)
        layout.addWidget(btn_box)

        if entry:
            self.title_edit.setText(entry.title)
            self.path_edit.setText(entry.path)
            self.prefix_edit.setText(entry.prefix)
            self.runner_edit.setText(entry.runner)
            self.protonfix_edit.setText(entry.protonfix)
            self.launch_args_edit.setText(entry.launch_arguments)
            self.game_args_edit.setText(entry.game_arguments)
            self.envars_edit.setPlainText("\n".join(f"{k}={v}" for k, v in entry.envars.items()))
            self.mangohud_chk.setChecked(entry.mangohud)
            self.gamemode_chk.setChecked(entry.gamemode)
            self.hidraw_chk.setChecked(entry.disable_hidraw)
            self.steam_chk.setChecked(entry.steam_shortcut)
        else:
            self.mangohud_chk.setChecked(settings.mangohud)
            self.gamemode_chk.setChecked(settings.gamemode)
            self.hidraw_chk.setChecked(settings.disable_hidraw)

    def _browse_dir(self, target: QtWidgets.QLineEdit, caption: str) -> None:
        directory = QtWidgets.QFileDialog.getExistingDirectory(self, caption)
        if directory:
            target.setText(directory)

    def _browse_file(self, target: QtWidgets.QLineEdit, caption: str) -> None:
        file_path, _ = QtWidgets.QFileDialog.getOpenFileName(self, caption, "", "Windows programs (*.exe *.msi *.bat);;All (*)")
        if file_path:
            target.setText(file_path)
            if target is self.path_edit and not self.title_edit.text().strip():
                self.title_edit.setText(Path(file_path).stem)

    def _envars(self) -> Optional[Dict[str, str]]:
        envars: Dict[str, str] = {}
        for line in self.envars_edit.toPlainText().splitlines():
            line = line.strip()
            if not line:
                continue
            key, sep, value = line.partition("=")
            if not sep or not ENV_KEY_RE.match(key.strip()):
                QtWidgets.QMessageBox.warning(self, APP_TITLE, f"Invalid environment line: {line}")
                return None
            envars[key.strip()] = value.strip()
        return envars

    def get_value(self) -> Optional[Game]:
        title = self.title_edit.text().strip()
        path = self.path_edit.text().strip()
        if not title or not path:
            QtWidgets.QMessageBox.warning(self, APP_TITLE, "Title and executable are required")
            return None
        envars = self._envars()
        if envars is None:
            return None

        values = dict(
            title=title,
            path=path,
            prefix=self.prefix_edit.text().strip() or str(Path(self.settings.default_prefix) / format_title(title)),
            runner=self.runner_edit.text().strip(),
            protonfix=self.protonfix_edit.text().strip(),
            launch_arguments=self.launch_args_edit.text().strip(),
            game_arguments=self.game_args_edit.text().strip(),
            envars=envars,
            mangohud=self.mangohud_chk.isChecked(),
            gamemode=self.gamemode_chk.isChecked(),
            disable_hidraw=self.hidraw_chk.isChecked(),
            steam_shortcut=self.steam_chk.isChecked(),
            wayland_driver=self.wayland_combo.currentData(),
            enable_hdr=self.hdr_combo.currentData(),
            enable_wow64=self.wow64_combo.currentData(),
            lossless_enabled=self.lossless_combo.currentData(),
        )
        if self.entry:
            return self.entry.clone(**values)
        return Game(gameid=new_game_id(), **values)
