"""Spawn the game detached from the launcher."""
from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

from .errors import SpawnError

_LOGGER = logging.getLogger(__name__)


def process_environment(
    composed: Mapping[str, str],
    unset: Iterable[str] = (),
    base: Optional[Mapping[str, str]] = None,
) -> dict:
    """Inherited environment updated with the composed overrides."""
    env = dict(os.environ if base is None else base)
    for key in unset:
        env.pop(key, None)
    env.update(composed)
    return env


def spawn(
    argv: List[str],
    env: Mapping[str, str],
    log_path: Path,
    cwd: Optional[str] = None,
) -> int:
    """Start ``argv`` in its own session with output appended to ``log_path``.

    Returns the pid. The child is not tracked after this call.
    """
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with open(log_path, "a", encoding="utf-8") as log:
        try:
            proc = subprocess.Popen(
                argv,
                env=dict(env),
                cwd=cwd or None,
                stdin=subprocess.DEVNULL,
                stdout=log,
                stderr=subprocess.STDOUT,
                start_new_session=True,
                close_fds=True,
            )
        except (OSError, ValueError) as exc:
            _LOGGER.error("Failed to launch %s: %s", argv[0], exc)
            raise SpawnError(argv[0], exc) from exc
    _LOGGER.info("Started %s (pid %s), log: %s", argv[0], proc.pid, log_path)
    return proc.pid


__all__ = ["process_environment", "spawn"]
