"""Per-subscriber persistence of the last confirmed radio settings."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Protocol

import yaml

LOGGER = logging.getLogger(__name__)

SETTINGS_STORE = "radiosetting"
SETTINGS_GROUP = "Settings"


class SettingsStore(Protocol):
    def open(self, imsi: str) -> dict[str, Any] | None:
        """Return the settings group for ``imsi``, or None if unavailable."""

    def sync(self, imsi: str, settings: dict[str, Any]) -> None:
        """Write the settings group for ``imsi``."""


class MemorySettingsStore:
    def __init__(self, initial: dict[str, dict[str, Any]] | None = None) -> None:
        self.groups: dict[str, dict[str, Any]] = {
            imsi: dict(group) for imsi, group in (initial or {}).items()
        }
        self.syncs = 0

    def open(self, imsi: str) -> dict[str, Any] | None:
        return dict(self.groups.get(imsi, {}))

    def sync(self, imsi: str, settings: dict[str, Any]) -> None:
        self.groups[imsi] = dict(settings)
        self.syncs += 1


def _data_dir() -> Path:
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_data / "radioctl"


class YamlSettingsStore:
    """Stores one YAML document per subscriber under the XDG data directory."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = root or _data_dir()

    def _path(self, imsi: str) -> Path:
        return self.root / imsi / f"{SETTINGS_STORE}.yaml"

    def open(self, imsi: str) -> dict[str, Any] | None:
        path = self._path(imsi)
        if not path.exists():
            return {}
        try:
            loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            LOGGER.warning("Could not read %s: %s", path, exc)
            return None

        if loaded is None:
            return {}
        group = loaded.get(SETTINGS_GROUP) if isinstance(loaded, dict) else None
        if not isinstance(group, dict):
            LOGGER.warning("Ignoring malformed settings file %s", path)
            return {}
        return dict(group)

    def sync(self, imsi: str, settings: dict[str, Any]) -> None:
        path = self._path(imsi)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(
                yaml.safe_dump({SETTINGS_GROUP: settings}, sort_keys=True),
                encoding="utf-8",
            )
        except OSError as exc:
            LOGGER.warning("Could not write %s: %s", path, exc)
