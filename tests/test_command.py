from __future__ import annotations

from pathlib import Path

import pytest

from faugus.command import build_command, find_umu_run, split_arguments
from faugus.errors import LaunchBinaryMissing
from faugus.middleware import MiddlewarePlan
from faugus.models import Game


def test_argv_order():
    game = Game(
        gameid="g1",
        title="Game",
        path="/games/g1/game.exe",
        launch_arguments="-dx11 -skipintro",
        game_arguments='--profile "Player One"',
    )
    argv = build_command(MiddlewarePlan(), game, Path("/usr/bin/umu-run"))
    assert argv == [
        "/usr/bin/umu-run",
        "/games/g1/game.exe",
        "-dx11",
        "-skipintro",
        "--profile",
        "Player One",
    ]


def test_wrapper_comes_first():
    plan = MiddlewarePlan(wrappers=[["/usr/bin/gamemoderun"]])
    game = Game(gameid="g1", title="Game", path="/games/g1/game.exe")
    argv = build_command(plan, game, Path("/usr/bin/umu-run"))
    assert argv == ["/usr/bin/gamemoderun", "/usr/bin/umu-run", "/games/g1/game.exe"]


def test_unbalanced_quotes_fall_back_to_whitespace():
    assert split_arguments('-name "unterminated') == ["-name", '"unterminated']
    assert split_arguments("   ") == []


def test_bundled_umu_run_is_preferred(umu_run):
    assert find_umu_run(find_binary=lambda name: Path("/usr/bin") / name) == umu_run


def test_umu_run_from_path(home):
    assert find_umu_run(find_binary=lambda name: Path("/usr/bin") / name) == Path("/usr/bin/umu-run")


def test_missing_umu_run(home):
    with pytest.raises(LaunchBinaryMissing) as excinfo:
        find_umu_run(find_binary=lambda name: None)
    assert excinfo.value.binary == "umu-run"
