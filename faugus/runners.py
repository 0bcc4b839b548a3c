"""Translate runner display names into umu-run PROTONPATH values."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from .errors import RunnerNotInstalled
from .models import LINUX_NATIVE
from .paths import Paths

UMU_PROTON_LATEST = "UMU-Proton Latest"
GE_PROTON_LATEST = "GE-Proton Latest (default)"
PROTON_EM_LATEST = "Proton-EM Latest"
PROTON_CACHYOS = "Proton-CachyOS"

SYSTEM_COMPAT_TOOLS = Path("/usr/share/steam/compatibilitytools.d")

_ALIASES = {
    GE_PROTON_LATEST: "GE-Proton",
    PROTON_EM_LATEST: "Proton-EM",
}
# Names umu-run downloads and keeps up to date on its own.
UMU_MANAGED = frozenset(_ALIASES.values())


def resolve_runner(name: str, system_tools: Path = SYSTEM_COMPAT_TOOLS) -> Optional[str]:
    """Return the PROTONPATH for ``name``.

    ``None`` means umu-run should pick its bundled Proton. Linux-Native is
    not a Proton build and is handled by the caller.
    """
    name = name.strip()
    if not name or name == UMU_PROTON_LATEST:
        return None
    if name in _ALIASES:
        return _ALIASES[name]
    if name == PROTON_CACHYOS:
        system_path = system_tools / PROTON_CACHYOS
        if system_path.exists():
            return str(system_path)
    return name


def validate_runner(
    name: str,
    user_tools: Optional[Path] = None,
    system_tools: Path = SYSTEM_COMPAT_TOOLS,
) -> None:
    """Raise RunnerNotInstalled unless umu-run can find the runner."""
    if is_linux_native(name):
        return
    resolved = resolve_runner(name, system_tools=system_tools)
    if resolved is None or resolved in UMU_MANAGED:
        return
    if resolved.startswith("/"):
        if Path(resolved).exists():
            return
        raise RunnerNotInstalled(name)
    user_tools = user_tools or Paths.steam_compat_tools_dir()
    if (user_tools / resolved).exists() or (system_tools / resolved).exists():
        return
    raise RunnerNotInstalled(name)


def is_linux_native(name: str) -> bool:
    return name.strip() == LINUX_NATIVE


__all__ = [
    "UMU_PROTON_LATEST",
    "GE_PROTON_LATEST",
    "PROTON_EM_LATEST",
    "PROTON_CACHYOS",
    "UMU_MANAGED",
    "resolve_runner",
    "validate_runner",
    "is_linux_native",
]
