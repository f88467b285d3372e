"""Stable public API for building tooling on top of radioctl.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals. Embedders driving their own event loop use
``RadioSettings`` with a driver of their own; ``Client`` covers the packaged
simulated modem profiles.
"""

from __future__ import annotations

from typing import Any

from radioctl.core.errors import (
    CapabilityMissingError,
    DriverFailureError,
    DriverRegistryError,
    InvalidArgumentError,
    ProfileLoadError,
    ProfileSelectionError,
    ProfileValidationError,
    RadioctlError,
    SettingsClosedError,
    SettingsError,
    UnsupportedValueError,
)
from radioctl.core.model import (
    Capability,
    ChangeResult,
    GsmBand,
    LegacyMode,
    ModemProfile,
    ModemSpec,
    ModernMode,
    PropertySnapshot,
    Technology,
    UmtsBand,
)
from radioctl.core.registry import DriverRegistry, default_registry
from radioctl.core.service import RadioService
from radioctl.core.settings import RadioSettings
from radioctl.core.storage import MemorySettingsStore, SettingsStore, YamlSettingsStore
from radioctl.drivers.base import RadioSettingsDriver

__all__ = [
    "RadioctlError",
    "SettingsError",
    "CapabilityMissingError",
    "DriverFailureError",
    "DriverRegistryError",
    "InvalidArgumentError",
    "ProfileLoadError",
    "ProfileSelectionError",
    "ProfileValidationError",
    "SettingsClosedError",
    "UnsupportedValueError",
    "Capability",
    "ChangeResult",
    "GsmBand",
    "LegacyMode",
    "ModemProfile",
    "ModemSpec",
    "ModernMode",
    "PropertySnapshot",
    "Technology",
    "UmtsBand",
    "DriverRegistry",
    "default_registry",
    "RadioSettings",
    "RadioSettingsDriver",
    "SettingsStore",
    "MemorySettingsStore",
    "YamlSettingsStore",
    "Client",
]


class Client:
    """Public client for reading and changing modem radio settings.

    A `Client` instance wraps profile loading, driver binding and the queued
    settings requests behind a stable API intended for third-party tools.
    """

    def __init__(
        self,
        *,
        registry: DriverRegistry | None = None,
        store: SettingsStore | None = None,
    ) -> None:
        self._service = RadioService(registry=registry, store=store)

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    def list_profiles(self) -> list[ModemProfile]:
        return self._service.list_profiles()

    def get_properties(self, *, profile_id: str | None = None) -> PropertySnapshot:
        return self._service.get_properties(profile_id=profile_id)

    def set_property(
        self,
        name: str,
        value: Any,
        *,
        profile_id: str | None = None,
    ) -> ChangeResult:
        return self._service.set_property(name, value, profile_id=profile_id)
