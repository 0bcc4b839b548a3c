from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from faugus.config import ConfigStore


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Point HOME and the XDG directories at a throwaway tree."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(home / ".local" / "share"))
    monkeypatch.delenv("STEAM_ROOT", raising=False)
    return home


@pytest.fixture
def config_dir(home):
    directory = home / ".config" / "faugus-launcher"
    directory.mkdir(parents=True)
    return directory


@pytest.fixture
def store(config_dir):
    return ConfigStore.in_directory(config_dir)


@pytest.fixture
def umu_run(home):
    path = home / ".local" / "share" / "faugus-launcher" / "umu-run"
    path.parent.mkdir(parents=True)
    path.write_text("#!/bin/sh\n", encoding="utf-8")
    return path


def write_games(directory: Path, games) -> None:
    (directory / "games.json").write_text(json.dumps(games, indent=4), encoding="utf-8")
