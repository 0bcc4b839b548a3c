"""Expand settings and per-title flags into variables and wrapper commands."""
from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set

from .errors import MiddlewareUnavailable
from .models import Game, GlobalSettings
from .runners import is_linux_native, resolve_runner

_LOGGER = logging.getLogger(__name__)

GAMEMODE_BINARY = "gamemoderun"
WINE_DEBUG_CHANNELS = "+all"
MONO_TRACE = "E:System.NotImplementedException"

# Every variable owned by the frame generation layer.
LSFG_VARIABLES = (
    "LSFG_LEGACY",
    "LSFG_MULTIPLIER",
    "LSFG_PERFORMANCE_MODE",
    "LSFG_HDR_MODE",
    "LSFG_FLOW_SCALE",
    "LSFG_DLL_PATH",
)

Which = Callable[[str], Optional[str]]


def flag(value: bool) -> str:
    return "1" if value else "0"


def _pick(override, default):
    return default if override is None else override


@dataclass
class MiddlewarePlan:
    """Result of mapping one title's settings for a single launch."""

    env: Dict[str, str] = field(default_factory=dict)
    wrappers: List[List[str]] = field(default_factory=list)
    warnings: List[MiddlewareUnavailable] = field(default_factory=list)
    # Keys that must not reach the process from any tier or the parent env.
    unset: Set[str] = field(default_factory=set)

    def set(self, key: str, value: str) -> None:
        if not key:
            raise ValueError("environment variable names must not be empty")
        self.env[key] = value


def frame_generation_env(settings: GlobalSettings, game: Game) -> Dict[str, str]:
    """Variables for lsfg-vk; empty unless frame generation is enabled."""
    if not _pick(game.lossless_enabled, settings.lossless_enabled):
        return {}
    multiplier = _pick(game.lossless_multiplier, settings.lossless_multiplier)
    flow = _pick(game.lossless_flow, settings.lossless_flow)
    env = {
        "LSFG_LEGACY": "1",
        "LSFG_MULTIPLIER": str(multiplier),
        "LSFG_PERFORMANCE_MODE": flag(_pick(game.lossless_performance, settings.lossless_performance)),
        "LSFG_HDR_MODE": flag(_pick(game.lossless_hdr, settings.lossless_hdr)),
        "LSFG_FLOW_SCALE": f"{flow / 100:g}",
    }
    if settings.lossless_location:
        env["LSFG_DLL_PATH"] = settings.lossless_location
    return env


def map_middleware(settings: GlobalSettings, game: Game, which: Which = shutil.which) -> MiddlewarePlan:
    plan = MiddlewarePlan()
    runner = game.runner or settings.default_runner

    if is_linux_native(runner):
        plan.set("UMU_NO_PROTON", "1")
    else:
        plan.set("WINEPREFIX", game.prefix or settings.default_prefix)
        protonpath = resolve_runner(runner)
        if protonpath:
            plan.set("PROTONPATH", protonpath)
    plan.set("GAMEID", game.protonfix or game.gameid)

    if _pick(game.wayland_driver, settings.wayland_driver):
        plan.set("PROTON_ENABLE_WAYLAND", "1")
    if _pick(game.enable_hdr, settings.enable_hdr):
        plan.set("PROTON_ENABLE_HDR", "1")
    if _pick(game.enable_wow64, settings.enable_wow64):
        plan.set("PROTON_USE_WOW64", "1")
    if settings.discrete_gpu:
        plan.set("__GLX_VENDOR_LIBRARY_NAME", settings.gpu_vendor)
    if settings.enable_logging:
        plan.set("WINEDEBUG", WINE_DEBUG_CHANNELS)
        plan.set("WINE_MONO_TRACE", MONO_TRACE)
    if game.mangohud:
        plan.set("MANGOHUD", "1")
    if game.disable_hidraw:
        plan.set("PROTON_DISABLE_HIDRAW", "1")

    lsfg_env = frame_generation_env(settings, game)
    for key, value in lsfg_env.items():
        plan.set(key, value)
    if not lsfg_env:
        plan.unset.update(LSFG_VARIABLES)

    if game.gamemode:
        gamemoderun = which(GAMEMODE_BINARY)
        if gamemoderun:
            plan.wrappers.append([gamemoderun])
        else:
            warning = MiddlewareUnavailable(GAMEMODE_BINARY, "GameMode")
            _LOGGER.warning("%s", warning)
            plan.warnings.append(warning)

    return plan


__all__ = [
    "GAMEMODE_BINARY",
    "LSFG_VARIABLES",
    "MiddlewarePlan",
    "flag",
    "frame_generation_env",
    "map_middleware",
]
