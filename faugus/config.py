"""Loading and persisting the three configuration sources."""
from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from .errors import ConfigFormatError, ConfigLineError
from .models import ENV_KEY_RE, GlobalSettings, Game
from .paths import Paths

_LOGGER = logging.getLogger(__name__)

COMMENT_PREFIXES = ("#", ";")
QUOTED_KEYS = {"default-prefix", "default-runner", "lossless-location"}
MAX_RECENT = 10

_GAMES_ADAPTER = TypeAdapter(List[Game])


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        where = ".".join(str(loc) for loc in error.get("loc", ())) or "<root>"
        parts.append(f"{where}: {error.get('msg')}")
    return "; ".join(parts)


def _write_text(path: Path, payload: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload, encoding="utf-8")


# ----- Environment override file --------------------------------------


def parse_env_line(lineno: int, raw: str) -> Optional[Tuple[str, str]]:
    """Return ``(key, value)`` or ``None`` for blank and comment lines.

    Raises ConfigLineError when the line is not ``KEY=value``.
    """
    line = raw.strip()
    if not line or line.startswith(COMMENT_PREFIXES):
        return None
    if "=" not in line:
        raise ConfigLineError(lineno, line, "missing '='")
    key, value = line.split("=", 1)
    key = key.strip()
    if not ENV_KEY_RE.match(key):
        raise ConfigLineError(lineno, line, f"invalid variable name {key!r}")
    return key, value.strip()


def parse_env_overrides(text: str) -> Tuple[Dict[str, str], List[ConfigLineError]]:
    """Parse envar.txt content, skipping bad lines instead of failing."""
    overrides: Dict[str, str] = {}
    problems: List[ConfigLineError] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        try:
            parsed = parse_env_line(lineno, raw)
        except ConfigLineError as exc:
            _LOGGER.warning("Ignoring environment override %s", exc)
            problems.append(exc)
            continue
        if parsed is not None:
            key, value = parsed
            overrides[key] = value
    return overrides, problems


def format_env_overrides(overrides: Dict[str, str]) -> str:
    for key in overrides:
        if not ENV_KEY_RE.match(key):
            raise ValueError(f"invalid environment variable name: {key!r}")
    return "".join(f"{key}={value}\n" for key, value in overrides.items())


# ----- config.ini -------------------------------------------------------


def parse_settings(text: str, path: Path) -> GlobalSettings:
    raw: Dict[str, str] = {}
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            raise ConfigFormatError(path, f"line {lineno} is not key=value: {line!r}")
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] == '"':
            value = value[1:-1]
        raw[key] = value

    try:
        settings = GlobalSettings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigFormatError(path, _describe(exc)) from exc
    for key in settings.model_extra or {}:
        _LOGGER.debug("Keeping unknown config key %s", key)
    return settings


def _ini_value(key: str, value: Any) -> str:
    if isinstance(value, bool):
        text = "True" if value else "False"
    elif isinstance(value, Enum):
        text = str(value.value)
    else:
        text = str(value)
    if key in QUOTED_KEYS:
        return f'"{text}"'
    return text


def format_settings(settings: GlobalSettings) -> str:
    data = settings.model_dump(by_alias=True)
    return "".join(f"{key}={_ini_value(key, value)}\n" for key, value in data.items())


# ----- Store ------------------------------------------------------------


class ConfigStore:
    """Reads and writes config.ini, games.json and envar.txt.

    Missing files yield defaults. Structured documents that fail to decode
    raise ConfigFormatError; nothing is coerced silently.
    """

    def __init__(
        self,
        config_file: Optional[Path] = None,
        games_file: Optional[Path] = None,
        envar_file: Optional[Path] = None,
        recent_file: Optional[Path] = None,
    ):
        self.config_file = config_file or Paths.config_file()
        self.games_file = games_file or Paths.games_json()
        self.envar_file = envar_file or Paths.envar_txt()
        self.recent_file = recent_file or Paths.latest_games_txt()

    @classmethod
    def in_directory(cls, directory: Path) -> "ConfigStore":
        return cls(
            config_file=directory / "config.ini",
            games_file=directory / "games.json",
            envar_file=directory / "envar.txt",
            recent_file=directory / "latest-games.txt",
        )

    # ----- Global settings ---------------------------------------------
    def load_global(self) -> GlobalSettings:
        if not self.config_file.exists():
            return GlobalSettings()
        try:
            text = self.config_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigFormatError(self.config_file, str(exc)) from exc
        return parse_settings(text, self.config_file)

    def save_global(self, settings: GlobalSettings) -> None:
        _write_text(self.config_file, format_settings(settings))

    # ----- Titles ------------------------------------------------------
    def load_titles(self, legacy: Optional[bool] = None) -> List[Game]:
        if not self.games_file.exists():
            return []
        if legacy is None:
            legacy = self.load_global().legacy_compat
        try:
            data = self.games_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigFormatError(self.games_file, str(exc)) from exc
        if not data.strip():
            return []
        try:
            return _GAMES_ADAPTER.validate_json(data, strict=not legacy, context={"legacy": legacy})
        except ValidationError as exc:
            raise ConfigFormatError(self.games_file, _describe(exc)) from exc

    def save_titles(self, games: Iterable[Game], legacy: Optional[bool] = None) -> None:
        if legacy is None:
            legacy = self.load_global().legacy_compat
        payload = _GAMES_ADAPTER.dump_python(list(games), mode="json", context={"legacy": legacy})
        _write_text(self.games_file, json.dumps(payload, indent=4, ensure_ascii=False))

    # ----- Environment overrides ---------------------------------------
    def load_env_overrides(self) -> Dict[str, str]:
        if not self.envar_file.exists():
            return {}
        try:
            text = self.envar_file.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            _LOGGER.error("Failed to read %s: %s", self.envar_file, exc)
            return {}
        overrides, _ = parse_env_overrides(text)
        return overrides

    def save_env_overrides(self, overrides: Dict[str, str]) -> None:
        _write_text(self.envar_file, format_env_overrides(overrides))

    # ----- Recently launched -------------------------------------------
    def recent_titles(self) -> List[str]:
        if not self.recent_file.exists():
            return []
        lines = self.recent_file.read_text(encoding="utf-8", errors="replace").splitlines()
        return [line.strip() for line in lines if line.strip()]

    def record_recent(self, title: str) -> None:
        titles = [t for t in self.recent_titles() if t != title]
        titles.insert(0, title)
        _write_text(self.recent_file, "\n".join(titles[:MAX_RECENT]) + "\n")


__all__ = [
    "ConfigStore",
    "format_env_overrides",
    "format_settings",
    "parse_env_line",
    "parse_env_overrides",
    "parse_settings",
]
