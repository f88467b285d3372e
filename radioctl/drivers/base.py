"""Radio settings driver interface."""

from __future__ import annotations

from typing import Any, ClassVar

from radioctl.core.errors import CapabilityMissingError
from radioctl.core.model import Capability, GsmBand, Technology, UmtsBand


class RadioSettingsDriver:
    """Polymorphic driver exposing an optional subset of radio operations.

    Subclasses declare what they implement in ``capabilities``; callers must
    check ``supports()`` before invoking an operation. Every async operation
    either returns its payload or raises ``DriverFailureError``, and must not
    complete synchronously: results are always delivered from a later turn of
    the event loop.
    """

    name: ClassVar[str] = ""
    capabilities: ClassVar[Capability] = Capability.NONE

    @classmethod
    def probe(cls, modem: Any) -> RadioSettingsDriver:
        """Bind a driver instance to a modem backend."""
        return cls()

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities

    @property
    def is_legacy(self) -> bool:
        # Drivers able to report a list of modes understand technology masks
        return not self.supports(Capability.QUERY_AVAILABLE_RAT_MODES)

    async def query_band(self) -> tuple[GsmBand, UmtsBand]:
        raise self._missing("query_band")

    async def set_band(self, band_gsm: GsmBand, band_umts: UmtsBand) -> None:
        raise self._missing("set_band")

    async def query_fast_dormancy(self) -> bool:
        raise self._missing("query_fast_dormancy")

    async def set_fast_dormancy(self, enable: bool) -> None:
        raise self._missing("set_fast_dormancy")

    async def query_rat_mode(self) -> Technology:
        raise self._missing("query_rat_mode")

    async def set_rat_mode(self, mode: Technology) -> None:
        raise self._missing("set_rat_mode")

    async def query_available_rats(self) -> Technology:
        raise self._missing("query_available_rats")

    async def query_available_rat_modes(self) -> tuple[Technology, ...]:
        raise self._missing("query_available_rat_modes")

    def map_legacy_rat_mode(self, tag: Technology) -> Technology:
        raise self._missing("map_legacy_rat_mode")

    def remove(self) -> None:
        """Release driver resources and drop completions not yet delivered."""

    def _missing(self, operation: str) -> CapabilityMissingError:
        return CapabilityMissingError(f"Driver '{self.name}' does not implement {operation}")
