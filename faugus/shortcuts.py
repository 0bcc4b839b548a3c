"""Keep Steam's shortcuts.vdf in step with the configured titles.

The file is Valve's binary KeyValues format: a ``shortcuts`` object whose
children are numbered ``"0"``, ``"1"``, ... and hold typed string, int32 and
nested-object values. Entries are identified by their app id, which Steam
derives from the executable and the display name, so regenerating a shortcut
for the same title updates it instead of adding a duplicate.
"""
from __future__ import annotations

import logging
import os
import shlex
import struct
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import vdf

from . import steam
from .errors import LaunchBinaryMissing, ShortcutFormatError
from .models import Game
from .paths import Paths

_LOGGER = logging.getLogger(__name__)

FAUGUS_RUN = "faugus-run"
APPID_HIGH_BIT = 0x80000000


def shortcut_appid(exe: str, app_name: str) -> int:
    """Steam's 32-bit id for a non-Steam shortcut: crc32(exe + name) | 0x80000000."""
    crc = zlib.crc32((exe + app_name).encode("utf-8")) & 0xFFFFFFFF
    return crc | APPID_HIGH_BIT


def to_signed32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & APPID_HIGH_BIT else value


def _strip_quotes(text: str) -> str:
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] == '"':
        return text[1:-1]
    return text


def _find_key(entry: Dict[str, Any], name: str) -> str:
    """Existing spelling of ``name``; Steam is not consistent about case."""
    lowered = name.lower()
    for key in entry:
        if key.lower() == lowered:
            return key
    return name


def _get(entry: Dict[str, Any], name: str, default: Any = None) -> Any:
    return entry.get(_find_key(entry, name), default)


def entry_appid(entry: Dict[str, Any]) -> Optional[int]:
    value = _get(entry, "appid")
    if isinstance(value, int) and not isinstance(value, bool):
        return value & 0xFFFFFFFF
    return None


def is_owned(entry: Dict[str, Any]) -> bool:
    exe = _get(entry, "Exe", "")
    return isinstance(exe, str) and os.path.basename(_strip_quotes(exe)) == FAUGUS_RUN


def owned_game_id(entry: Dict[str, Any]) -> Optional[str]:
    options = _get(entry, "LaunchOptions", "")
    if not isinstance(options, str):
        return None
    try:
        parts = shlex.split(options)
    except ValueError:
        return None
    if len(parts) >= 2 and parts[0] == "--game":
        return parts[1]
    return None


@dataclass
class ShortcutRecord:
    appid: int
    app_name: str
    exe: str
    start_dir: str
    icon: str = ""
    launch_options: str = ""
    tags: List[str] = field(default_factory=list)

    @classmethod
    def for_game(cls, game: Game, faugus_run: str, icons_dir: Path) -> "ShortcutRecord":
        exe = f'"{faugus_run}"'
        icon = icons_dir / f"{game.gameid}.png"
        start_dir = str(Path(game.path).parent) if game.path else "."
        return cls(
            appid=shortcut_appid(exe, game.title),
            app_name=game.title,
            exe=exe,
            start_dir=start_dir,
            icon=str(icon) if icon.exists() else "",
            launch_options=f"--game {shlex.quote(game.gameid)}",
        )

    @classmethod
    def from_entry(cls, entry: Dict[str, Any]) -> "ShortcutRecord":
        tags = _get(entry, "tags", {})
        return cls(
            appid=entry_appid(entry) or 0,
            app_name=str(_get(entry, "AppName", "")),
            exe=str(_get(entry, "Exe", "")),
            start_dir=str(_get(entry, "StartDir", "")),
            icon=str(_get(entry, "icon", "")),
            launch_options=str(_get(entry, "LaunchOptions", "")),
            tags=[str(v) for v in tags.values()] if isinstance(tags, dict) else [],
        )

    def _owned_fields(self) -> Dict[str, Any]:
        return {
            "appid": to_signed32(self.appid),
            "AppName": self.app_name,
            "Exe": self.exe,
            "StartDir": self.start_dir,
            "icon": self.icon,
            "LaunchOptions": self.launch_options,
        }

    def apply(self, entry: Dict[str, Any]) -> Dict[str, Any]:
        """Copy of ``entry`` with the owned fields replaced, other keys kept."""
        updated = dict(entry)
        for name, value in self._owned_fields().items():
            updated[_find_key(updated, name)] = value
        return updated

    def new_entry(self) -> Dict[str, Any]:
        entry = self._owned_fields()
        entry.update(
            {
                "ShortcutPath": "",
                "IsHidden": 0,
                "AllowDesktopConfig": 1,
                "AllowOverlay": 1,
                "OpenVR": 0,
                "Devkit": 0,
                "DevkitGameID": "",
                "DevkitOverrideAppID": 0,
                "LastPlayTime": 0,
                "FlatpakAppID": "",
                "tags": {str(i): tag for i, tag in enumerate(self.tags)},
            }
        )
        # Keep Steam's column order: ShortcutPath sits before LaunchOptions.
        order = ["appid", "AppName", "Exe", "StartDir", "icon", "ShortcutPath", "LaunchOptions"]
        return {key: entry[key] for key in order + [k for k in entry if k not in order]}


class ShortcutCollection:
    """In-memory copy of shortcuts.vdf; entries keep their file order."""

    def __init__(self, entries: Optional[List[Dict[str, Any]]] = None):
        self.entries: List[Dict[str, Any]] = entries or []

    # ----- Codec -------------------------------------------------------
    @classmethod
    def loads(cls, data: bytes, path: Path = Path("shortcuts.vdf")) -> "ShortcutCollection":
        if not data:
            return cls()
        try:
            document = vdf.binary_loads(data)
        except (SyntaxError, ValueError, TypeError, struct.error, UnicodeDecodeError) as exc:
            raise ShortcutFormatError(path, str(exc)) from exc
        if not document:
            return cls()
        shortcuts = document.get("shortcuts")
        if not isinstance(shortcuts, dict):
            raise ShortcutFormatError(path, "missing 'shortcuts' object")
        entries = []
        for key, entry in shortcuts.items():
            if not isinstance(entry, dict):
                raise ShortcutFormatError(path, f"shortcut {key!r} is not an object")
            entries.append(entry)
        return cls(entries)

    def dumps(self) -> bytes:
        shortcuts = {str(index): entry for index, entry in enumerate(self.entries)}
        return vdf.binary_dumps({"shortcuts": shortcuts})

    @classmethod
    def load(cls, path: Path) -> "ShortcutCollection":
        if not path.exists():
            _LOGGER.info("%s does not exist, starting an empty collection", path)
            return cls()
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise ShortcutFormatError(path, str(exc)) from exc
        collection = cls.loads(data, path)
        _LOGGER.info("Loaded %d Steam shortcuts from %s", len(collection.entries), path)
        return collection

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(path.name + ".tmp")
        tmp.write_bytes(self.dumps())
        os.replace(tmp, path)

    # ----- Queries -----------------------------------------------------
    def records(self) -> List[ShortcutRecord]:
        return [ShortcutRecord.from_entry(entry) for entry in self.entries]

    def owned_ids(self) -> List[str]:
        return [gid for gid in (owned_game_id(e) for e in self.entries if is_owned(e)) if gid]

    # ----- Mutation ----------------------------------------------------
    def sync(self, games: Iterable[Game], faugus_run: str, icons_dir: Path) -> None:
        """Insert or replace one entry per title with shortcuts enabled.

        Owned entries that no longer match a wanted title are dropped; entries
        belonging to anything else are left exactly as they were.
        """
        wanted: Dict[int, ShortcutRecord] = {}
        for game in games:
            if game.steam_shortcut:
                record = ShortcutRecord.for_game(game, faugus_run, icons_dir)
                wanted[record.appid] = record

        placed = set()
        entries: List[Dict[str, Any]] = []
        for entry in self.entries:
            if not is_owned(entry):
                entries.append(entry)
                continue
            appid = entry_appid(entry)
            record = wanted.get(appid) if appid is not None else None
            if record is None or appid in placed:
                _LOGGER.info("Removing Steam shortcut %s", _get(entry, "AppName", "?"))
                continue
            entries.append(record.apply(entry))
            placed.add(appid)

        for appid, record in wanted.items():
            if appid not in placed:
                _LOGGER.info("Creating Steam shortcut %s", record.app_name)
                entries.append(record.new_entry())
        self.entries = entries


class ShortcutSynchronizer:
    """Loads, synchronizes and rewrites the whole shortcuts file."""

    def __init__(
        self,
        path: Optional[Path] = None,
        faugus_run: Optional[str] = None,
        icons_dir: Optional[Path] = None,
    ):
        self._path = path
        self._faugus_run = faugus_run
        self.icons_dir = icons_dir or Paths.icons_dir()

    @property
    def path(self) -> Optional[Path]:
        return self._path or steam.shortcuts_vdf_path()

    def faugus_run(self) -> str:
        if self._faugus_run:
            return self._faugus_run
        found = Paths.find_binary(FAUGUS_RUN)
        if not found:
            raise LaunchBinaryMissing(FAUGUS_RUN, "Steam shortcuts need it on PATH.")
        return str(found)

    def sync(self, games: Iterable[Game]) -> bool:
        """Returns True when the file was rewritten."""
        path = self.path
        if path is None:
            _LOGGER.warning("Steam user data not found, skipping shortcut sync")
            return False
        games = list(games)
        faugus_run = self.faugus_run() if any(g.steam_shortcut for g in games) else ""
        collection = ShortcutCollection.load(path)
        before = collection.dumps() if collection.entries else b""
        collection.sync(games, faugus_run, self.icons_dir)
        after = collection.dumps() if collection.entries else b""
        if before == after and (path.exists() or not after):
            return False
        collection.save(path)
        _LOGGER.info("Saved %d Steam shortcuts to %s", len(collection.entries), path)
        return True


__all__ = [
    "FAUGUS_RUN",
    "ShortcutCollection",
    "ShortcutRecord",
    "ShortcutSynchronizer",
    "is_owned",
    "owned_game_id",
    "shortcut_appid",
    "to_signed32",
]
