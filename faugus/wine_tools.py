"""Run winecfg and winetricks inside a prefix through umu-run."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .command import find_umu_run
from .config import ConfigStore
from .errors import NoWinePrefix
from .models import Game
from .paths import Paths
from .process import process_environment, spawn
from .runners import is_linux_native, resolve_runner, validate_runner

_LOGGER = logging.getLogger(__name__)

WINECFG = "winecfg"
WINETRICKS = "winetricks"
PREFIX_TOOLS = (WINECFG, WINETRICKS)
WINETRICKS_GAMEID = "winetricks-gui"
DEFAULT_GAMEID = "default"


def prefix_tool_command(
    tool: str,
    prefix: str,
    runner: str,
    umu_run: Path,
    game_id: Optional[str] = None,
) -> Tuple[List[str], Dict[str, str]]:
    """argv and environment for ``tool`` in ``prefix``.

    umu-run opens the winetricks GUI when GAMEID is ``winetricks-gui`` and
    the program argument is empty.
    """
    if tool not in PREFIX_TOOLS:
        raise ValueError(f"unknown prefix tool: {tool!r}")
    env = {"WINEPREFIX": prefix}
    if tool == WINETRICKS:
        env["GAMEID"] = WINETRICKS_GAMEID
        env["STORE"] = "none"
        target = ""
    else:
        env["GAMEID"] = game_id or DEFAULT_GAMEID
        target = WINECFG
    protonpath = resolve_runner(runner)
    if protonpath:
        env["PROTONPATH"] = protonpath
    return [str(umu_run), target], env


def run_prefix_tool(tool: str, game: Optional[Game] = None, store: Optional[ConfigStore] = None) -> int:
    """Start ``tool`` in the title's prefix, or the default prefix without a title."""
    store = store or ConfigStore()
    settings = store.load_global()
    runner = (game.runner if game else "") or settings.default_runner
    if is_linux_native(runner):
        raise NoWinePrefix(game.title if game else "The default runner")
    prefix = (game.prefix if game else "") or settings.default_prefix
    validate_runner(runner)
    umu_run = find_umu_run()
    argv, env = prefix_tool_command(tool, prefix, runner, umu_run, game.gameid if game else None)

    try:
        Path(prefix).expanduser().mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        _LOGGER.warning("Could not create prefix %s: %s", prefix, exc)
    _LOGGER.info("Running %s in %s", tool, prefix)
    log_path = Paths.game_log(game.gameid if game else DEFAULT_GAMEID)
    return spawn(argv, process_environment(env), log_path)


__all__ = ["PREFIX_TOOLS", "WINECFG", "WINETRICKS", "prefix_tool_command", "run_prefix_tool"]
