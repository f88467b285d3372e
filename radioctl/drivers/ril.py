"""Technology-mask radio settings driver for RIL-based modems."""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping

from radioctl.core.errors import DriverFailureError
from radioctl.core.model import Capability, Technology
from radioctl.core.rat import access_modes_to_string, build_legacy_rat_table
from radioctl.drivers.base import RadioSettingsDriver
from radioctl.drivers.idle_queue import IdleQueue
from radioctl.drivers.modem import SimulatedModem

LOGGER = logging.getLogger(__name__)


class _Tag(enum.Enum):
    QUERY_AVAILABLE_RATS = 1
    QUERY_AVAILABLE_MODES = 2
    QUERY_RAT_MODE = 3
    SET_RAT_MODE = 4


class RilRadioSettingsDriver(RadioSettingsDriver):
    name = "ril"
    capabilities = (
        Capability.QUERY_RAT_MODE
        | Capability.SET_RAT_MODE
        | Capability.QUERY_AVAILABLE_RATS
        | Capability.QUERY_AVAILABLE_RAT_MODES
        | Capability.MAP_LEGACY_RAT_MODE
    )

    def __init__(self, modem: SimulatedModem) -> None:
        self.modem = modem
        self.supported_modes = tuple(modem.supported_modes)
        self.legacy_rat_map: Mapping[Technology, Technology] = build_legacy_rat_table(
            self.supported_modes
        )
        self._iq = IdleQueue()
        self._prefix = f"{modem.log_prefix} " if modem.log_prefix else ""
        for tier, mode in self.legacy_rat_map.items():
            LOGGER.debug("%s%s -> 0x%x", self._prefix, access_modes_to_string(tier), mode)

    @classmethod
    def probe(cls, modem: SimulatedModem) -> RilRadioSettingsDriver:
        return cls(modem)

    async def set_rat_mode(self, mode: Technology) -> None:
        LOGGER.debug("%sset rat mode %s", self._prefix, access_modes_to_string(mode))

        def _apply() -> None:
            # Refuse to accept unsupported modes
            if mode != Technology.ANY and mode not in self.supported_modes:
                raise DriverFailureError(
                    f"{self._prefix}mode {access_modes_to_string(mode)} is not supported"
                )
            self.modem.check("set_rat_mode")
            self.modem.pref_mode = mode

        await self._iq.later(_Tag.SET_RAT_MODE, _apply)

    async def query_rat_mode(self) -> Technology:
        def _read() -> Technology:
            self.modem.check("query_rat_mode")
            LOGGER.debug("%srat mode %s", self._prefix, access_modes_to_string(self.modem.pref_mode))
            return self.modem.pref_mode

        return await self._iq.later(_Tag.QUERY_RAT_MODE, _read)

    async def query_available_rats(self) -> Technology:
        def _read() -> Technology:
            self.modem.check("query_available_rats")
            return self.modem.techs

        return await self._iq.later(_Tag.QUERY_AVAILABLE_RATS, _read)

    async def query_available_rat_modes(self) -> tuple[Technology, ...]:
        def _read() -> tuple[Technology, ...]:
            self.modem.check("query_available_rat_modes")
            return self.supported_modes

        return await self._iq.later(_Tag.QUERY_AVAILABLE_MODES, _read)

    def map_legacy_rat_mode(self, tag: Technology) -> Technology:
        return self.legacy_rat_map.get(tag, Technology.ANY)

    def remove(self) -> None:
        LOGGER.debug("%sremove", self._prefix)
        self._iq.cancel_all()
