"""Locate the Steam installation and the active user's shortcuts.vdf."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import vdf

_LOGGER = logging.getLogger(__name__)

STEAMID64_BASE = 76561197960265728


def _steam_root_candidates() -> List[Path]:
    home = Path(os.environ.get("HOME") or Path.home())
    data_home = Path(os.environ.get("XDG_DATA_HOME") or home / ".local" / "share")
    candidates = [
        data_home / "Steam",
        home / ".steam" / "steam",
        home / ".steam" / "root",
        home / ".var" / "app" / "com.valvesoftware.Steam" / ".steam" / "steam",
    ]
    steam_root = os.environ.get("STEAM_ROOT")
    if steam_root:
        candidates.insert(0, Path(steam_root))
    return candidates


def find_steam_root() -> Optional[Path]:
    for candidate in _steam_root_candidates():
        if (candidate / "userdata").is_dir():
            return candidate
    return None


def _read_vdf(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        return vdf.loads(path.read_text(encoding="utf-8", errors="ignore"))
    except (OSError, SyntaxError) as exc:
        _LOGGER.error("Failed to read VDF %s: %s", path, exc)
        return {}


def _most_recent_account(steam_root: Path) -> Optional[str]:
    data = _read_vdf(steam_root / "config" / "loginusers.vdf")
    users = data.get("users") if isinstance(data, dict) else None
    if not isinstance(users, dict):
        return None
    for steamid64, info in users.items():
        if isinstance(info, dict) and str(info.get("MostRecent", "0")) == "1":
            try:
                return str(int(steamid64) - STEAMID64_BASE)
            except ValueError:
                continue
    return None


def find_user_id(steam_root: Path) -> Optional[str]:
    userdata = steam_root / "userdata"
    recent = _most_recent_account(steam_root)
    if recent and (userdata / recent).is_dir():
        return recent
    try:
        ids = sorted(p.name for p in userdata.iterdir() if p.is_dir() and p.name.isdigit())
    except OSError as exc:
        _LOGGER.error("Failed to enumerate %s: %s", userdata, exc)
        return None
    # "0" is the anonymous placeholder account.
    ids = [i for i in ids if i != "0"] or ids
    return ids[0] if ids else None


def shortcuts_vdf_path() -> Optional[Path]:
    steam_root = find_steam_root()
    if steam_root is None:
        return None
    user_id = find_user_id(steam_root)
    if user_id is None:
        return None
    return steam_root / "userdata" / user_id / "config" / "shortcuts.vdf"


__all__ = ["find_steam_root", "find_user_id", "shortcuts_vdf_path"]
