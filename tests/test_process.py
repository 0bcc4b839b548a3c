from __future__ import annotations

import subprocess

import pytest

from faugus import process
from faugus.errors import SpawnError


class FakePopen:
    calls = []

    def __init__(self, argv, **kwargs):
        self.argv = argv
        self.kwargs = kwargs
        self.pid = 4242
        kwargs["stdout"].write("started\n")
        FakePopen.calls.append(self)


@pytest.fixture
def fake_popen(monkeypatch):
    FakePopen.calls = []
    monkeypatch.setattr(process.subprocess, "Popen", FakePopen)
    return FakePopen


def test_process_environment_layers():
    base = {"PATH": "/usr/bin", "LSFG_MULTIPLIER": "4", "WINEPREFIX": "/old"}
    env = process.process_environment({"WINEPREFIX": "/new"}, unset={"LSFG_MULTIPLIER"}, base=base)
    assert env == {"PATH": "/usr/bin", "WINEPREFIX": "/new"}
    assert base["LSFG_MULTIPLIER"] == "4"


def test_spawn_detaches_and_appends_log(tmp_path, fake_popen):
    log_path = tmp_path / "logs" / "g1.log"
    log_path.parent.mkdir()
    log_path.write_text("previous run\n", encoding="utf-8")

    pid = process.spawn(["/usr/bin/umu-run", "game.exe"], {"GAMEID": "g1"}, log_path, cwd=str(tmp_path))

    assert pid == 4242
    [call] = fake_popen.calls
    assert call.argv == ["/usr/bin/umu-run", "game.exe"]
    assert call.kwargs["start_new_session"] is True
    assert call.kwargs["stdin"] is subprocess.DEVNULL
    assert call.kwargs["stderr"] is subprocess.STDOUT
    assert call.kwargs["env"] == {"GAMEID": "g1"}
    assert call.kwargs["cwd"] == str(tmp_path)
    assert log_path.read_text(encoding="utf-8") == "previous run\nstarted\n"


def test_spawn_creates_log_directory(tmp_path, fake_popen):
    log_path = tmp_path / "a" / "b" / "g1.log"
    process.spawn(["true"], {}, log_path)
    assert log_path.exists()


def test_spawn_failure_is_reported(tmp_path, monkeypatch):
    def refuse(argv, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", argv[0])

    monkeypatch.setattr(process.subprocess, "Popen", refuse)
    with pytest.raises(SpawnError) as excinfo:
        process.spawn(["/missing/umu-run"], {}, tmp_path / "g1.log")
    assert excinfo.value.argv0 == "/missing/umu-run"
    assert isinstance(excinfo.value.cause, FileNotFoundError)


def test_rejected_environment_is_reported(tmp_path, monkeypatch):
    def refuse(argv, **kwargs):
        raise ValueError("illegal environment variable name")

    monkeypatch.setattr(process.subprocess, "Popen", refuse)
    with pytest.raises(SpawnError) as excinfo:
        process.spawn(["/usr/bin/umu-run"], {"BAD KEY=x": "1"}, tmp_path / "g1.log")
    assert isinstance(excinfo.value.cause, ValueError)
