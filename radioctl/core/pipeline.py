"""Initial query sequence that fills the settings state from the driver."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from radioctl.core.errors import DriverFailureError
from radioctl.core.model import (
    LEGACY_TECHNOLOGIES,
    Capability,
    GsmBand,
    Technology,
    UmtsBand,
    legacy_mode,
)
from radioctl.core.rat import sticky_mode, split_technologies

if TYPE_CHECKING:
    from radioctl.core.settings import RadioSettings

LOGGER = logging.getLogger(__name__)


class QueryPipeline:
    """Query rat mode, band, fast dormancy and available technologies.

    Stages whose capability the driver lacks are skipped. A failing stage is
    logged and leaves its fields untouched; the remaining stages still run
    and the settings end up cached either way.
    """

    def __init__(self, settings: RadioSettings) -> None:
        self._settings = settings
        self.runs = 0

    async def run(self) -> None:
        self.runs += 1
        for stage in (
            self._query_rat_mode,
            self._query_band,
            self._query_fast_dormancy,
            self._query_available_rats,
        ):
            try:
                await stage()
            except DriverFailureError as exc:
                LOGGER.debug("Error during %s: %s", stage.__name__.lstrip("_"), exc)
        self._settings.mark_cached()

    async def _query_rat_mode(self) -> None:
        driver = self._settings.driver
        if not driver.supports(Capability.QUERY_RAT_MODE):
            return

        reported = Technology(await driver.query_rat_mode())
        state = self._settings.state
        if driver.is_legacy:
            if reported != Technology.ANY and reported not in LEGACY_TECHNOLOGIES:
                raise DriverFailureError(f"Driver reported invalid technology 0x{int(reported):x}")
            mode = legacy_mode(reported)
        else:
            # A legacy tag chosen earlier stays visible while it still
            # describes what the modem reports
            mode = sticky_mode(state.mode, reported, self._settings.map_legacy_rat)

        state.pending_mode = mode
        self._settings.commit_rat_mode()

    async def _query_band(self) -> None:
        driver = self._settings.driver
        if not driver.supports(Capability.QUERY_BAND):
            return

        band_gsm, band_umts = await driver.query_band()
        try:
            band_gsm, band_umts = GsmBand(band_gsm), UmtsBand(band_umts)
        except ValueError as exc:
            raise DriverFailureError(f"Driver reported invalid band: {exc}") from exc

        state = self._settings.state
        state.pending_band_gsm = band_gsm
        state.pending_band_umts = band_umts
        self._settings.commit_band()

    async def _query_fast_dormancy(self) -> None:
        driver = self._settings.driver
        if not driver.supports(Capability.QUERY_FAST_DORMANCY):
            return

        self._settings.state.pending_fast_dormancy = bool(await driver.query_fast_dormancy())
        self._settings.commit_fast_dormancy()

    async def _query_available_rats(self) -> None:
        # Modem technology is not supposed to change, one answer is enough
        driver = self._settings.driver
        state = self._settings.state
        if state.available_modes is not None:
            return

        if driver.supports(Capability.QUERY_AVAILABLE_RAT_MODES):
            modes = await driver.query_available_rat_modes()
            state.available_modes = tuple(Technology(mode) for mode in modes)
        elif driver.supports(Capability.QUERY_AVAILABLE_RATS):
            state.available_modes = split_technologies(await driver.query_available_rats())
