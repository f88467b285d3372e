"""Single-technology radio settings driver.

Models the older modem firmwares that only know one preferred technology at
a time. Bands and fast dormancy are supported; the available technologies
are reported as a plain mask.
"""

from __future__ import annotations

import logging

from radioctl.core.errors import DriverFailureError
from radioctl.core.model import Capability, GsmBand, Technology, UmtsBand
from radioctl.core.rat import legacy_mode_to_string
from radioctl.drivers.base import RadioSettingsDriver
from radioctl.drivers.idle_queue import IdleQueue
from radioctl.drivers.modem import SimulatedModem

LOGGER = logging.getLogger(__name__)


class LegacyRadioSettingsDriver(RadioSettingsDriver):
    name = "legacy"
    capabilities = (
        Capability.QUERY_BAND
        | Capability.SET_BAND
        | Capability.QUERY_FAST_DORMANCY
        | Capability.SET_FAST_DORMANCY
        | Capability.QUERY_RAT_MODE
        | Capability.SET_RAT_MODE
        | Capability.QUERY_AVAILABLE_RATS
    )

    def __init__(self, modem: SimulatedModem) -> None:
        self.modem = modem
        self._iq = IdleQueue()

    @classmethod
    def probe(cls, modem: SimulatedModem) -> LegacyRadioSettingsDriver:
        return cls(modem)

    async def query_band(self) -> tuple[GsmBand, UmtsBand]:
        def _read() -> tuple[GsmBand, UmtsBand]:
            self.modem.check("query_band")
            return self.modem.band_gsm, self.modem.band_umts

        return await self._iq.later("query_band", _read)

    async def set_band(self, band_gsm: GsmBand, band_umts: UmtsBand) -> None:
        def _apply() -> None:
            self.modem.check("set_band")
            self.modem.band_gsm = band_gsm
            self.modem.band_umts = band_umts

        await self._iq.later("set_band", _apply)

    async def query_fast_dormancy(self) -> bool:
        def _read() -> bool:
            self.modem.check("query_fast_dormancy")
            return self.modem.fast_dormancy

        return await self._iq.later("query_fast_dormancy", _read)

    async def set_fast_dormancy(self, enable: bool) -> None:
        def _apply() -> None:
            self.modem.check("set_fast_dormancy")
            self.modem.fast_dormancy = enable

        await self._iq.later("set_fast_dormancy", _apply)

    async def query_rat_mode(self) -> Technology:
        def _read() -> Technology:
            self.modem.check("query_rat_mode")
            return self.modem.pref_mode

        return await self._iq.later("query_rat_mode", _read)

    async def set_rat_mode(self, mode: Technology) -> None:
        LOGGER.debug("set rat mode %s", legacy_mode_to_string(mode))

        def _apply() -> None:
            if mode != Technology.ANY and not (mode & self.modem.techs):
                raise DriverFailureError(f"Technology {legacy_mode_to_string(mode)} not available")
            self.modem.check("set_rat_mode")
            self.modem.pref_mode = mode

        await self._iq.later("set_rat_mode", _apply)

    async def query_available_rats(self) -> Technology:
        def _read() -> Technology:
            self.modem.check("query_available_rats")
            return self.modem.techs

        return await self._iq.later("query_available_rats", _read)

    def remove(self) -> None:
        self._iq.cancel_all()
