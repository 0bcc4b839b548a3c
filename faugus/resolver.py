"""Precedence rules for composing the launch environment."""
from __future__ import annotations

from typing import Dict, Mapping, Optional


def compose_environment(
    env_file: Optional[Mapping[str, str]] = None,
    title_overrides: Optional[Mapping[str, str]] = None,
    launcher_overrides: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """Merge the override tiers, lowest precedence first.

    A key set by a higher tier replaces the lower tier's value outright;
    values are never merged or concatenated.
    """
    composed: Dict[str, str] = {}
    for source in (env_file, title_overrides, launcher_overrides):
        for key, value in (source or {}).items():
            if not key:
                raise ValueError("environment variable names must not be empty")
            # Re-insert so the winning tier also decides the ordering.
            composed.pop(key, None)
            composed[key] = str(value)
    return composed


__all__ = ["compose_environment"]
