"""Data models for global settings and configured titles."""
from __future__ import annotations

import re
import uuid
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    FieldSerializationInfo,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    ValidationInfo,
    field_serializer,
    field_validator,
    model_serializer,
    model_validator,
)

from .paths import Paths

APP_TITLE = "Faugus Launcher"
DEFAULT_RUNNER = "GE-Proton"
LINUX_NATIVE = "Linux-Native"

# Values the predecessor stored instead of booleans in games.json.
LEGACY_MARKERS = {
    "mangohud": "MANGOHUD=1",
    "gamemode": "gamemoderun",
    "disable_hidraw": "PROTON_DISABLE_HIDRAW=1",
    "addapp_checkbox": "addapp_enabled",
}

_FALSE_STRINGS = {"", "false", "0"}

ENV_KEY_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")

# Override fields the predecessor either lacks or cannot read as null.
_LEGACY_OPTIONAL = (
    "lossless_enabled",
    "lossless_multiplier",
    "lossless_performance",
    "lossless_hdr",
    "wayland_driver",
    "enable_hdr",
    "enable_wow64",
)
# The predecessor keeps lossless_flow as a boolean; the scale rides alongside.
LEGACY_FLOW_SCALE = "lossless_flow_scale"


def format_title(title: str) -> str:
    """Turn a display title into an identifier: "Test's Game" -> "tests-game"."""
    kept = []
    for ch in title.strip().lower():
        if ch == " ":
            kept.append("-")
        elif ch.isalnum() or ch == "-":
            kept.append(ch)
    return "-".join(part for part in "".join(kept).split("-") if part)


def _is_legacy(info: ValidationInfo) -> bool:
    return bool(info.context and info.context.get("legacy"))


class InterfaceMode(str, Enum):
    LIST = "List"
    BLOCKS = "Blocks"
    BANNERS = "Banners"


class GlobalSettings(BaseModel):
    """Process wide settings stored in config.ini.

    Instances are frozen snapshots: load once per launch, pass them down, and
    replace the whole record with ``model_copy(update=...)`` before saving.
    Keys unknown to this version are kept in ``model_extra``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    close_on_launch: bool = Field(False, alias="close-onlaunch")
    default_prefix: str = Field(default_factory=lambda: str(Paths.default_prefix()), alias="default-prefix")
    mangohud: bool = False
    gamemode: bool = False
    disable_hidraw: bool = Field(False, alias="disable-hidraw")
    default_runner: str = Field(DEFAULT_RUNNER, alias="default-runner")
    lossless_location: str = Field("", alias="lossless-location")
    discrete_gpu: bool = Field(False, alias="discrete-gpu")
    gpu_vendor: str = Field("nvidia", alias="gpu-vendor", min_length=1)
    splash_disable: bool = Field(False, alias="splash-disable")
    system_tray: bool = Field(False, alias="system-tray")
    start_boot: bool = Field(False, alias="start-boot")
    mono_icon: bool = Field(False, alias="mono-icon")
    interface_mode: InterfaceMode = Field(InterfaceMode.LIST, alias="interface-mode")
    start_maximized: bool = Field(False, alias="start-maximized")
    start_fullscreen: bool = Field(False, alias="start-fullscreen")
    show_labels: bool = Field(False, alias="show-labels")
    smaller_banners: bool = Field(False, alias="smaller-banners")
    enable_logging: bool = Field(False, alias="enable-logging")
    wayland_driver: bool = Field(False, alias="wayland-driver")
    enable_hdr: bool = Field(False, alias="enable-hdr")
    enable_wow64: bool = Field(False, alias="enable-wow64")
    language: str = "en_US"
    logging_warning: bool = Field(False, alias="logging-warning")
    show_hidden: bool = Field(False, alias="show-hidden")
    lossless_enabled: bool = Field(False, alias="lossless-enabled")
    lossless_multiplier: int = Field(2, alias="lossless-multiplier", ge=1, le=20)
    lossless_performance: bool = Field(False, alias="lossless-performance")
    lossless_hdr: bool = Field(False, alias="lossless-hdr")
    lossless_flow: int = Field(100, alias="lossless-flow", ge=25, le=100)
    legacy_compat: bool = Field(True, alias="legacy-compat")

    @field_validator("*", mode="before")
    @classmethod
    def _strict_bool_spelling(cls, value: Any, info: ValidationInfo) -> Any:
        field = cls.model_fields.get(info.field_name or "")
        if field is None or field.annotation is not bool or not isinstance(value, str):
            return value
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
        raise ValueError(f"expected True or False, got {value!r}")


class Game(BaseModel):
    """Title record persisted in games.json.

    ``None`` in an override field means "use the global setting".
    """

    model_config = ConfigDict(validate_assignment=True)

    gameid: str = Field(min_length=1)
    title: str
    path: str = ""
    prefix: str = Field(default_factory=lambda: str(Paths.default_prefix()))
    launch_arguments: str = ""
    game_arguments: str = ""
    mangohud: bool = False
    gamemode: bool = False
    disable_hidraw: bool = False
    protonfix: str = ""
    runner: str = ""
    addapp_checkbox: bool = False
    addapp: str = ""
    addapp_bat: str = ""
    banner: Optional[str] = None
    lossless_enabled: Optional[bool] = None
    lossless_multiplier: Optional[int] = Field(None, ge=1, le=20)
    lossless_flow: Optional[int] = Field(None, ge=25, le=100)
    lossless_performance: Optional[bool] = None
    lossless_hdr: Optional[bool] = None
    wayland_driver: Optional[bool] = None
    enable_hdr: Optional[bool] = None
    enable_wow64: Optional[bool] = None
    envars: Dict[str, str] = Field(default_factory=dict)
    steam_shortcut: bool = False
    playtime: int = 0
    hidden: bool = False

    @model_validator(mode="before")
    @classmethod
    def _legacy_record(cls, data: Any, info: ValidationInfo) -> Any:
        if not _is_legacy(info) or not isinstance(data, dict):
            return data
        if not data.get("gameid"):
            title = data.get("title")
            if isinstance(title, str) and format_title(title):
                data = dict(data, gameid=format_title(title))
        if LEGACY_FLOW_SCALE in data:
            data = dict(data)
            scale = data.pop(LEGACY_FLOW_SCALE)
            if data.get("lossless_flow") is not False:
                data["lossless_flow"] = scale
        return data

    @field_validator("envars")
    @classmethod
    def _valid_env_names(cls, value: Dict[str, str]) -> Dict[str, str]:
        for key in value:
            if not ENV_KEY_RE.match(key):
                raise ValueError(f"invalid environment variable name: {key!r}")
        return value

    @field_validator(
        "mangohud",
        "gamemode",
        "disable_hidraw",
        "addapp_checkbox",
        "lossless_enabled",
        "lossless_performance",
        "lossless_hdr",
        mode="before",
    )
    @classmethod
    def _legacy_bool(cls, value: Any, info: ValidationInfo) -> Any:
        if _is_legacy(info) and isinstance(value, str):
            return value.strip().lower() not in _FALSE_STRINGS
        return value

    @field_validator("lossless_flow", mode="before")
    @classmethod
    def _legacy_flow(cls, value: Any, info: ValidationInfo) -> Any:
        # The predecessor stored a boolean here; it carries no scale.
        if _is_legacy(info) and (isinstance(value, bool) or value == ""):
            return None
        return value

    @field_validator("banner", mode="before")
    @classmethod
    def _empty_banner(cls, value: Any) -> Any:
        return value or None

    @field_serializer("mangohud", "gamemode", "disable_hidraw", "addapp_checkbox")
    def _dump_marker(self, value: bool, info: FieldSerializationInfo) -> Any:
        if info.context and info.context.get("legacy"):
            return LEGACY_MARKERS[info.field_name] if value else ""
        return value

    @model_serializer(mode="wrap")
    def _legacy_shape(self, handler: SerializerFunctionWrapHandler, info: SerializationInfo) -> Dict[str, Any]:
        data = handler(self)
        if not (info.context and info.context.get("legacy")):
            return data
        if data.get("banner") is None:
            data["banner"] = ""
        for name in _LEGACY_OPTIONAL:
            if data.get(name) is None:
                data.pop(name, None)
        flow = data.pop("lossless_flow", None)
        if flow is not None:
            data["lossless_flow"] = True
            data[LEGACY_FLOW_SCALE] = flow
        return data

    @property
    def target(self) -> str:
        """Executable handed to umu-run."""
        if self.addapp_checkbox and self.addapp_bat:
            return self.addapp_bat
        return self.path

    def clone(self, **updates: Any) -> "Game":
        return self.model_copy(update=updates)

    def duplicate(self) -> "Game":
        return self.clone(
            gameid=str(uuid.uuid4()),
            title=f"{self.title} (Copy)",
            playtime=0,
            hidden=False,
            envars=dict(self.envars),
        )


def new_game_id() -> str:
    return str(uuid.uuid4())


__all__ = [
    "APP_TITLE",
    "DEFAULT_RUNNER",
    "ENV_KEY_RE",
    "LINUX_NATIVE",
    "LEGACY_MARKERS",
    "GlobalSettings",
    "Game",
    "InterfaceMode",
    "format_title",
    "new_game_id",
]
