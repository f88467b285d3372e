"""Driver registry keyed by driver name."""

from __future__ import annotations

import logging
from typing import Any

from radioctl.core.errors import DriverRegistryError
from radioctl.drivers.base import RadioSettingsDriver

LOGGER = logging.getLogger(__name__)


class DriverRegistry:
    def __init__(self, drivers: tuple[type[RadioSettingsDriver], ...] = ()) -> None:
        self._drivers: dict[str, type[RadioSettingsDriver]] = {}
        for driver in drivers:
            self.register(driver)

    def register(self, driver: type[RadioSettingsDriver]) -> None:
        if not driver.name:
            raise DriverRegistryError(f"Driver class {driver.__name__} has no name")
        LOGGER.debug("driver: %s, name: %s", driver.__name__, driver.name)
        self._drivers[driver.name] = driver

    def unregister(self, driver: type[RadioSettingsDriver]) -> None:
        if self._drivers.get(driver.name) is driver:
            del self._drivers[driver.name]

    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._drivers))

    def create(self, name: str, modem: Any) -> RadioSettingsDriver:
        driver = self._drivers.get(name)
        if driver is None:
            available = ", ".join(self.names())
            raise DriverRegistryError(f"No driver named '{name}'. Available: {available}")
        return driver.probe(modem)


def default_registry() -> DriverRegistry:
    from radioctl.drivers.legacy import LegacyRadioSettingsDriver
    from radioctl.drivers.ril import RilRadioSettingsDriver

    return DriverRegistry((RilRadioSettingsDriver, LegacyRadioSettingsDriver))
