"""Service layer used by CLI and the public API."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from radioctl.core.errors import ProfileSelectionError
from radioctl.core.model import ChangeResult, ModemProfile, PropertySnapshot
from radioctl.core.profile_loader import load_profiles
from radioctl.core.registry import DriverRegistry, default_registry
from radioctl.core.settings import RadioSettings
from radioctl.core.storage import SettingsStore, YamlSettingsStore
from radioctl.drivers.modem import SimulatedModem

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class RadioService:
    def __init__(
        self,
        *,
        registry: DriverRegistry | None = None,
        store: SettingsStore | None = None,
    ) -> None:
        loaded = load_profiles()
        self.profiles = loaded.profiles
        self.load_warnings = loaded.warnings
        self.registry = registry or default_registry()
        self.store = store if store is not None else YamlSettingsStore()

    def list_profiles(self) -> list[ModemProfile]:
        return sorted(self.profiles.values(), key=lambda p: p.id)

    def resolve_profile(self, profile_id: str | None) -> ModemProfile:
        if profile_id:
            profile = self.profiles.get(profile_id)
            if profile is None:
                raise ProfileSelectionError(
                    f"Unknown profile '{profile_id}'. Use 'radioctl profiles' to inspect available profiles."
                )
            return profile

        if not self.profiles:
            raise ProfileSelectionError("No modem profiles loaded.")
        if len(self.profiles) > 1:
            candidates = ", ".join(sorted(self.profiles))
            raise ProfileSelectionError(
                f"Multiple modem profiles available: {candidates}. Use --profile to choose one."
            )
        return next(iter(self.profiles.values()))

    def get_properties(self, profile_id: str | None = None) -> PropertySnapshot:
        profile = self.resolve_profile(profile_id)

        async def _action(settings: RadioSettings) -> dict[str, Any]:
            return await settings.get_properties()

        return PropertySnapshot(profile=profile, properties=self._run(profile, _action))

    def set_property(self, name: str, value: Any, profile_id: str | None = None) -> ChangeResult:
        profile = self.resolve_profile(profile_id)
        changes: list[tuple[str, Any]] = []

        async def _action(settings: RadioSettings) -> dict[str, Any]:
            # Available technologies are needed to validate the new value
            await settings.get_properties()
            settings.add_listener(lambda changed, new: changes.append((changed, new)))
            await settings.set_property(name, value)
            return await settings.get_properties()

        properties = self._run(profile, _action)
        return ChangeResult(
            profile=profile,
            name=name,
            value=value,
            changes=tuple(changes),
            properties=properties,
        )

    def _run(self, profile: ModemProfile, action: Callable[[RadioSettings], Awaitable[T]]) -> T:
        async def _session() -> T:
            modem = SimulatedModem(profile.modem, log_prefix=profile.id)
            driver = self.registry.create(profile.driver, modem)
            settings = RadioSettings(driver, imsi=profile.imsi, store=self.store)
            try:
                await settings.register()
                return await action(settings)
            finally:
                settings.close()

        LOGGER.debug("Opening %s via driver '%s'", profile.id, profile.driver)
        return asyncio.run(_session())
