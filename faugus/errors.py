"""Error taxonomy shared by the launch engine."""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class FaugusError(Exception):
    """Base class for every error raised by the engine."""


class ConfigFormatError(FaugusError):
    """A structured record (config.ini, games.json) could not be decoded."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class ConfigLineError(FaugusError):
    """A single line of the environment override file is malformed."""

    def __init__(self, lineno: int, line: str, reason: str):
        super().__init__(f"line {lineno}: {reason}: {line!r}")
        self.lineno = lineno
        self.line = line
        self.reason = reason


class ResolutionError(FaugusError):
    """No title matches the requested identifier."""

    def __init__(self, game_id: str):
        super().__init__(f"Game '{game_id}' was not found")
        self.game_id = game_id


class MiddlewareUnavailable(FaugusError):
    """An optional wrapper binary is missing; the launch continues without it."""

    def __init__(self, binary: str, feature: str):
        super().__init__(f"{binary} not found on PATH, launching without {feature}")
        self.binary = binary
        self.feature = feature


class LaunchBinaryMissing(FaugusError):
    """A mandatory binary (umu-run, faugus-run) could not be located."""

    def __init__(self, binary: str, hint: Optional[str] = None):
        message = f"{binary} not found"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(message)
        self.binary = binary


class RunnerNotInstalled(FaugusError):
    """The configured Proton build is not in any compatibility tools directory."""

    def __init__(self, runner: str):
        super().__init__(f"Runner '{runner}' is not installed. Please install it via Proton Manager.")
        self.runner = runner


class NoWinePrefix(FaugusError):
    """A prefix tool was requested for a title that runs without Wine."""

    def __init__(self, title: str):
        super().__init__(f"{title} runs natively and has no Wine prefix")
        self.title = title


class SpawnError(FaugusError):

    """The game process could not be created."""

    def __init__(self, argv0: str, cause: Exception):
        super().__init__(f"Failed to start {argv0}: {cause}")
        self.argv0 = argv0
        self.cause = cause


class ShortcutFormatError(FaugusError):
    """The Steam shortcuts collection could not be parsed."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


__all__ = [
    "FaugusError",
    "ConfigFormatError",
    "ConfigLineError",
    "ResolutionError",
    "MiddlewareUnavailable",
    "LaunchBinaryMissing",
    "RunnerNotInstalled",
    "NoWinePrefix",
    "SpawnError",
    "ShortcutFormatError",
]
