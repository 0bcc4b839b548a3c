"""Launch orchestration: configuration snapshot in, detached process out."""
from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Set

from .command import build_command, find_umu_run
from .config import ConfigStore
from .errors import MiddlewareUnavailable, ResolutionError
from .middleware import map_middleware
from .models import Game, GlobalSettings
from .paths import Paths
from .process import process_environment, spawn
from .resolver import compose_environment
from .runners import validate_runner

_LOGGER = logging.getLogger(__name__)


@dataclass
class LaunchRequest:
    """Everything needed to start one title, computed without side effects."""

    game: Game
    argv: List[str]
    env: Dict[str, str]
    log_path: Path
    cwd: Optional[str] = None
    unset: Set[str] = field(default_factory=set)
    warnings: List[MiddlewareUnavailable] = field(default_factory=list)


def find_game(games: List[Game], game_id: str) -> Game:
    for game in games:
        if game.gameid == game_id:
            return game
    raise ResolutionError(game_id)


def _working_directory(game: Game) -> Optional[str]:
    parent = Path(game.target).parent if game.target else None
    if parent and parent.is_dir():
        return str(parent)
    return None


def build_request(
    game: Game,
    settings: GlobalSettings,
    env_file: Dict[str, str],
    umu_run: Path,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> LaunchRequest:
    plan = map_middleware(settings, game, which=which)
    argv = build_command(plan, game, umu_run)
    env = compose_environment(env_file, game.envars, plan.env)
    for key in plan.unset:
        env.pop(key, None)
    return LaunchRequest(
        game=game,
        argv=argv,
        env=env,
        log_path=Paths.game_log(game.gameid),
        cwd=_working_directory(game),
        unset=set(plan.unset),
        warnings=list(plan.warnings),
    )


def prepare_launch(
    game_id: str,
    store: Optional[ConfigStore] = None,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> LaunchRequest:
    """Load configuration and build the launch, without touching the system."""
    store = store or ConfigStore()
    settings = store.load_global()
    games = store.load_titles(legacy=settings.legacy_compat)
    game = find_game(games, game_id)
    validate_runner(game.runner or settings.default_runner)
    env_file = store.load_env_overrides()
    umu_run = find_umu_run()
    return build_request(game, settings, env_file, umu_run, which=which)


def execute(request: LaunchRequest, store: Optional[ConfigStore] = None) -> int:
    game = request.game
    prefix = request.env.get("WINEPREFIX")
    if prefix:
        try:
            Path(prefix).expanduser().mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            _LOGGER.warning("Could not create prefix %s: %s", prefix, exc)
    env = process_environment(request.env, request.unset)
    _LOGGER.info("Launching %s: %s", game.title, " ".join(request.argv))
    pid = spawn(request.argv, env, request.log_path, cwd=request.cwd)
    if store is not None:
        try:
            store.record_recent(game.title)
        except OSError as exc:
            _LOGGER.error("Failed to update recent games: %s", exc)
    return pid


def launch_title(game_id: str, store: Optional[ConfigStore] = None) -> int:
    store = store or ConfigStore()
    request = prepare_launch(game_id, store)
    return execute(request, store)


__all__ = [
    "LaunchRequest",
    "build_request",
    "execute",
    "find_game",
    "launch_title",
    "prepare_launch",
]
