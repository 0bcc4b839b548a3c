from __future__ import annotations

import shlex

import pytest

from conftest import write_games
from faugus import cli, process
from faugus.paths import Paths


@pytest.fixture
def no_spawn(monkeypatch):
    def forbidden(*args, **kwargs):
        raise AssertionError("no process may be started")

    monkeypatch.setattr(process.subprocess, "Popen", forbidden)


@pytest.fixture
def one_game(config_dir, home):
    write_games(
        config_dir,
        [{"gameid": "g1", "title": "Game", "path": str(home / "game.exe"), "prefix": str(home / "pfx")}],
    )


def test_unknown_game_exits_with_failure(one_game, umu_run, no_spawn, capsys):
    assert cli.main(["--game", "nope"]) == cli.EXIT_FAILURE
    assert "Game 'nope' was not found" in capsys.readouterr().err


def test_blank_game_id(no_spawn, home, capsys):
    assert cli.main(["--game", "  "]) == cli.EXIT_FAILURE


def test_missing_argument_exits_with_failure(no_spawn, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert excinfo.value.code == cli.EXIT_FAILURE


def test_missing_umu_run(one_game, no_spawn, monkeypatch, capsys):
    monkeypatch.setattr(Paths, "find_binary", staticmethod(lambda name: None))
    assert cli.main(["--game", "g1"]) == cli.EXIT_FAILURE
    assert "umu-run not found" in capsys.readouterr().err


def test_dry_run_prints_command(one_game, umu_run, home, no_spawn, capsys):
    assert cli.main(["--game", "g1", "--dry-run"]) == cli.EXIT_OK
    out = capsys.readouterr().out.splitlines()
    assert out[-1] == shlex.join([str(umu_run), str(home / "game.exe")])
    assert "GAMEID=g1" in out


def test_launch_spawns(one_game, umu_run, home, monkeypatch):
    started = []
    monkeypatch.setattr(cli, "execute", lambda request, store: started.append(request.argv) or 1)
    assert cli.main(["--game", "g1"]) == cli.EXIT_OK
    assert started == [[str(umu_run), str(home / "game.exe")]]


def test_invalid_title_env_name_exits_cleanly(config_dir, home, umu_run, no_spawn, capsys):
    write_games(config_dir, [{"gameid": "g1", "title": "Game", "envars": {"": "1"}}])
    assert cli.main(["--game", "g1", "--dry-run"]) == cli.EXIT_FAILURE
    assert "invalid environment variable name" in capsys.readouterr().err


def test_missing_runner_exits_with_failure(config_dir, home, umu_run, no_spawn, capsys):
    write_games(
        config_dir,
        [{"gameid": "g1", "title": "Game", "path": str(home / "game.exe"), "runner": "Proton-Not-Installed-1"}],
    )
    assert cli.main(["--game", "g1"]) == cli.EXIT_FAILURE
    assert "Proton-Not-Installed-1" in capsys.readouterr().err
