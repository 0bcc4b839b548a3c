"""XDG aware locations of every file the launcher reads or writes."""
from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Optional

APP_DIR_NAME = "faugus-launcher"


def _home() -> Path:
    return Path(os.environ.get("HOME") or Path.home())


def _xdg(var: str, fallback: str) -> Path:
    value = os.environ.get(var)
    if value:
        return Path(value)
    return _home() / fallback


class Paths:
    """Resolved on every call so the environment can be changed at runtime."""

    @staticmethod
    def config_home() -> Path:
        return _xdg("XDG_CONFIG_HOME", ".config")

    @staticmethod
    def data_home() -> Path:
        return _xdg("XDG_DATA_HOME", ".local/share")

    @staticmethod
    def config_dir() -> Path:
        return Paths.config_home() / APP_DIR_NAME

    @staticmethod
    def config_file() -> Path:
        return Paths.config_dir() / "config.ini"

    @staticmethod
    def games_json() -> Path:
        return Paths.config_dir() / "games.json"

    @staticmethod
    def envar_txt() -> Path:
        return Paths.config_dir() / "envar.txt"

    @staticmethod
    def latest_games_txt() -> Path:
        return Paths.config_dir() / "latest-games.txt"

    @staticmethod
    def logs_dir() -> Path:
        return Paths.config_dir() / "logs"

    @staticmethod
    def game_log(game_id: str) -> Path:
        return Paths.logs_dir() / f"{game_id}.log"

    @staticmethod
    def icons_dir() -> Path:
        return Paths.config_dir() / "icons"

    @staticmethod
    def default_prefix() -> Path:
        return _home() / "Faugus"

    @staticmethod
    def umu_run() -> Path:
        return Paths.data_home() / APP_DIR_NAME / "umu-run"

    @staticmethod
    def steam_compat_tools_dir() -> Path:
        return Paths.data_home() / "Steam" / "compatibilitytools.d"

    @staticmethod
    def find_binary(name: str) -> Optional[Path]:
        found = shutil.which(name)
        return Path(found) if found else None


__all__ = ["APP_DIR_NAME", "Paths"]
