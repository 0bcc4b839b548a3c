"""Assemble the argv passed to the operating system."""
from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Callable, List, Optional

from .errors import LaunchBinaryMissing
from .middleware import MiddlewarePlan
from .models import Game
from .paths import Paths

_LOGGER = logging.getLogger(__name__)

UMU_RUN = "umu-run"


def find_umu_run(find_binary: Optional[Callable[[str], Optional[Path]]] = None) -> Path:
    """Locate umu-run, preferring the copy managed by the launcher."""
    bundled = Paths.umu_run()
    if bundled.exists():
        return bundled
    found = (find_binary or Paths.find_binary)(UMU_RUN)
    if found:
        return found
    raise LaunchBinaryMissing(UMU_RUN, "Please install UMU-Launcher.")


def split_arguments(text: str) -> List[str]:
    if not text or not text.strip():
        return []
    try:
        return shlex.split(text)
    except ValueError as exc:
        # Unbalanced quotes: fall back to plain whitespace splitting.
        _LOGGER.warning("Could not parse arguments %r (%s), splitting on whitespace", text, exc)
        return text.split()


def build_command(plan: MiddlewarePlan, game: Game, umu_run: Path) -> List[str]:
    """``[wrappers...] umu-run <target> <launch args...> <game args...>``

    Wrappers invoke umu-run as their program argument; nothing is preloaded.
    """
    argv: List[str] = []
    for wrapper in plan.wrappers:
        argv.extend(wrapper)
    argv.append(str(umu_run))
    argv.append(game.target)
    argv.extend(split_arguments(game.launch_arguments))
    argv.extend(split_arguments(game.game_arguments))
    return argv


__all__ = ["UMU_RUN", "build_command", "find_umu_run", "split_arguments"]
