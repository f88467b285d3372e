"""Radio access settings of one modem: cached state, queued requests, commits.

``RadioSettings`` sits between a property-style client interface and a
``RadioSettingsDriver``. Requests are serialized through a ``RequestQueue``;
the first ``get_properties`` runs the ``QueryPipeline`` and every later one is
answered from cached state. Mutations stage a pending value, call the driver,
then either commit (notify listeners, persist) or roll the pending value back.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from radioctl.core.errors import (
    CapabilityMissingError,
    DriverFailureError,
    InvalidArgumentError,
    UnsupportedValueError,
)
from radioctl.core.model import (
    LEGACY_TECHNOLOGIES,
    NO_PREFERENCE,
    Capability,
    GsmBand,
    LegacyMode,
    ModernMode,
    RatMode,
    SettingsState,
    Technology,
    UmtsBand,
    legacy_mode,
)
from radioctl.core.pipeline import QueryPipeline
from radioctl.core.queue import RequestQueue
from radioctl.core.rat import (
    access_modes_from_string,
    access_modes_to_string,
    default_legacy_rat_mapping,
    legacy_mode_from_string,
    legacy_mode_to_string,
    rat_mode_to_string,
)
from radioctl.core.storage import SettingsStore
from radioctl.drivers.base import RadioSettingsDriver

LOGGER = logging.getLogger(__name__)

TECHNOLOGY_PREFERENCE = "TechnologyPreference"
GSM_BAND = "GsmBand"
UMTS_BAND = "UmtsBand"
FAST_DORMANCY = "FastDormancy"
AVAILABLE_TECHNOLOGIES = "AvailableTechnologies"

Listener = Callable[[str, Any], None]


class RadioSettings:
    def __init__(
        self,
        driver: RadioSettingsDriver,
        *,
        imsi: str | None = None,
        store: SettingsStore | None = None,
    ) -> None:
        self.driver = driver
        self.imsi = imsi
        self.store = store
        self.state = SettingsState()
        self._settings: dict[str, Any] | None = None
        self._listeners: list[Listener] = []
        self._queue = RequestQueue()
        self._pipeline = QueryPipeline(self)

    @property
    def pipeline_runs(self) -> int:
        return self._pipeline.runs

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def map_legacy_rat(self, tag: Technology) -> Technology:
        """Technology mask the driver uses to realize a legacy tag.

        Returns ``ANY`` when the driver cannot realize the tag at all.
        """
        if tag == Technology.ANY or self.driver.is_legacy:
            return tag
        if self.driver.supports(Capability.MAP_LEGACY_RAT_MODE):
            return Technology(self.driver.map_legacy_rat_mode(tag))
        return default_legacy_rat_mapping(tag)

    def is_mode_supported(self, mode: Technology) -> bool:
        if mode == Technology.ANY:
            return True
        if self.state.available_modes is None:
            # Nothing known about the modem yet, assume everything works
            return True
        return mode in self.state.available_modes

    def driver_mode(self, mode: RatMode) -> Technology:
        if isinstance(mode, LegacyMode):
            return self.map_legacy_rat(mode.tag)
        return mode.mask

    async def register(self) -> None:
        """Load persisted settings and push them to the modem.

        Runs as the first queued request, so nothing reaches the driver before
        the stored band and mode have been applied. Failures are only logged.
        """
        await self._queue.submit(self._register_handler)

    async def get_properties(self) -> dict[str, Any]:
        return await self._queue.submit(self._get_properties_handler)

    async def set_property(self, name: str, value: Any) -> None:
        await self._queue.submit(self._set_property_handler, name, value)

    def close(self) -> None:
        LOGGER.debug("Removing radio settings (%d queued requests)", self._queue.pending())
        self._queue.close()
        self.driver.remove()

    def properties(self) -> dict[str, Any]:
        state = self.state
        props: dict[str, Any] = {TECHNOLOGY_PREFERENCE: rat_mode_to_string(state.mode)}

        if self.driver.supports(Capability.QUERY_BAND):
            props[GSM_BAND] = state.band_gsm.label
            props[UMTS_BAND] = state.band_umts.label

        if self.driver.supports(Capability.QUERY_FAST_DORMANCY):
            props[FAST_DORMANCY] = state.fast_dormancy

        available = state.available_modes
        if available is not None:
            if self.driver.is_legacy:
                names = [legacy_mode_to_string(mode) for mode in available]
            else:
                names = [
                    legacy_mode_to_string(tag)
                    for tag in LEGACY_TECHNOLOGIES
                    if self.map_legacy_rat(tag)
                ]
                names.extend(access_modes_to_string(mode) for mode in available)
            props[AVAILABLE_TECHNOLOGIES] = [name for name in names if name is not None]

        return props

    def mark_cached(self) -> None:
        self.state.cached = True
        self._queue.reply_all(self._get_properties_handler, self.properties)

    def commit_rat_mode(self) -> None:
        state = self.state
        if state.mode == state.pending_mode:
            return
        state.mode = state.pending_mode
        text = rat_mode_to_string(state.mode)
        self._emit(TECHNOLOGY_PREFERENCE, text)
        self._persist(TECHNOLOGY_PREFERENCE, text)

    def commit_band(self) -> None:
        state = self.state
        if state.band_gsm != state.pending_band_gsm:
            state.band_gsm = state.pending_band_gsm
            self._emit(GSM_BAND, state.band_gsm.label)
            self._persist(GSM_BAND, int(state.band_gsm))

        if state.band_umts != state.pending_band_umts:
            state.band_umts = state.pending_band_umts
            self._emit(UMTS_BAND, state.band_umts.label)
            self._persist(UMTS_BAND, int(state.band_umts))

    def commit_fast_dormancy(self) -> None:
        state = self.state
        if state.fast_dormancy == state.pending_fast_dormancy:
            return
        state.fast_dormancy = state.pending_fast_dormancy
        self._emit(FAST_DORMANCY, state.fast_dormancy)

    async def _register_handler(self) -> None:
        if self.imsi is None:
            return

        self._load_settings()

        if self.driver.supports(Capability.SET_BAND):
            try:
                await self.driver.set_band(self.state.band_gsm, self.state.band_umts)
            except DriverFailureError as exc:
                LOGGER.debug("Error setting radio frequency band at register time: %s", exc)

        if self.driver.supports(Capability.SET_RAT_MODE):
            try:
                await self.driver.set_rat_mode(self.driver_mode(self.state.mode))
            except DriverFailureError as exc:
                LOGGER.debug("Error setting radio access mode at register time: %s", exc)

    async def _get_properties_handler(self) -> dict[str, Any]:
        if not self.state.cached:
            await self._pipeline.run()
        return self.properties()

    async def _set_property_handler(self, name: str, value: Any) -> None:
        if name == TECHNOLOGY_PREFERENCE:
            await self._set_technology_preference(value)
        elif name == GSM_BAND:
            await self._set_gsm_band(value)
        elif name == UMTS_BAND:
            await self._set_umts_band(value)
        elif name == FAST_DORMANCY:
            await self._set_fast_dormancy(value)
        else:
            raise InvalidArgumentError(f"Unknown property '{name}'")

    async def _set_technology_preference(self, value: Any) -> None:
        if not self.driver.supports(Capability.SET_RAT_MODE):
            raise CapabilityMissingError(f"{TECHNOLOGY_PREFERENCE} cannot be changed on this modem")
        if not isinstance(value, str):
            raise InvalidArgumentError(f"{TECHNOLOGY_PREFERENCE} must be a string")

        mode: RatMode
        tag = legacy_mode_from_string(value)
        if tag is not None:
            mode = legacy_mode(tag)
            mask = tag
            if self.driver.is_legacy:
                if not self.is_mode_supported(tag):
                    raise UnsupportedValueError(f"Technology '{value}' is not supported")
            elif tag != Technology.ANY:
                mask = self.map_legacy_rat(tag)
                if not mask:
                    raise UnsupportedValueError(f"Technology '{value}' is not supported")
        else:
            parsed = access_modes_from_string(value)
            if parsed is None:
                raise InvalidArgumentError(f"Invalid technology preference '{value}'")
            mask = parsed
            mode = ModernMode(mask)
            if self.driver.is_legacy or not self.is_mode_supported(mask):
                raise UnsupportedValueError(f"Technology combination '{value}' is not supported")

        state = self.state
        if state.mode == mode:
            return

        state.pending_mode = mode
        try:
            await self.driver.set_rat_mode(mask)
        except DriverFailureError:
            LOGGER.debug("Error setting radio access mode")
            state.pending_mode = state.mode
            raise
        self.commit_rat_mode()

    async def _set_gsm_band(self, value: Any) -> None:
        if not self.driver.supports(Capability.SET_BAND):
            raise CapabilityMissingError(f"{GSM_BAND} cannot be changed on this modem")
        band = GsmBand.from_label(value) if isinstance(value, str) else None
        if band is None:
            raise InvalidArgumentError(f"Invalid GSM band '{value}'")

        state = self.state
        if state.band_gsm == band:
            return

        state.pending_band_gsm = band
        await self._push_band(state.pending_band_gsm, state.band_umts)

    async def _set_umts_band(self, value: Any) -> None:
        if not self.driver.supports(Capability.SET_BAND):
            raise CapabilityMissingError(f"{UMTS_BAND} cannot be changed on this modem")
        band = UmtsBand.from_label(value) if isinstance(value, str) else None
        if band is None:
            raise InvalidArgumentError(f"Invalid UMTS band '{value}'")

        state = self.state
        if state.band_umts == band:
            return

        state.pending_band_umts = band
        await self._push_band(state.band_gsm, state.pending_band_umts)

    async def _push_band(self, band_gsm: GsmBand, band_umts: UmtsBand) -> None:
        state = self.state
        try:
            await self.driver.set_band(band_gsm, band_umts)
        except DriverFailureError:
            LOGGER.debug("Error setting radio frequency band")
            state.pending_band_gsm = state.band_gsm
            state.pending_band_umts = state.band_umts
            raise
        self.commit_band()

    async def _set_fast_dormancy(self, value: Any) -> None:
        if not self.driver.supports(Capability.SET_FAST_DORMANCY):
            raise CapabilityMissingError(f"{FAST_DORMANCY} cannot be changed on this modem")
        if not isinstance(value, bool):
            raise InvalidArgumentError(f"{FAST_DORMANCY} must be a boolean")

        state = self.state
        if state.fast_dormancy == value:
            return

        state.pending_fast_dormancy = value
        try:
            await self.driver.set_fast_dormancy(value)
        except DriverFailureError:
            LOGGER.debug("Error setting fast dormancy")
            state.pending_fast_dormancy = state.fast_dormancy
            raise
        self.commit_fast_dormancy()

    def _emit(self, name: str, value: Any) -> None:
        for listener in list(self._listeners):
            try:
                listener(name, value)
            except Exception:
                LOGGER.exception("Listener failed on %s change", name)

    def _persist(self, key: str, value: Any) -> None:
        if self._settings is None or self.store is None or self.imsi is None:
            return
        self._settings[key] = value
        self.store.sync(self.imsi, self._settings)

    def _load_settings(self) -> None:
        settings = None
        if self.store is not None and self.imsi is not None:
            settings = self.store.open(self.imsi)

        # No settings present or error: keep the defaults (any/any/any)
        if settings is None:
            LOGGER.debug("radio settings storage open failed")
            return

        self._settings = settings
        state = self.state

        state.band_gsm = _load_band(settings, GSM_BAND, GsmBand)
        state.pending_band_gsm = state.band_gsm
        state.band_umts = _load_band(settings, UMTS_BAND, UmtsBand)
        state.pending_band_umts = state.band_umts

        mode: RatMode = NO_PREFERENCE
        raw = settings.get(TECHNOLOGY_PREFERENCE)
        if raw is not None:
            text = str(raw)
            tag = legacy_mode_from_string(text)
            mask = access_modes_from_string(text)
            if tag is not None:
                if self.driver.is_legacy or self.map_legacy_rat(tag):
                    mode = legacy_mode(tag)
            elif mask is not None:
                mode = ModernMode(mask)
            else:
                # Old format: the integer value of a legacy tag
                mode = _migrate_mode(text)
                LOGGER.info("migrating %s -> %s", text, rat_mode_to_string(mode))
                # Written out with the next sync
                settings[TECHNOLOGY_PREFERENCE] = rat_mode_to_string(mode)

        state.mode = mode
        state.pending_mode = mode

        LOGGER.debug("%s: %s", TECHNOLOGY_PREFERENCE, rat_mode_to_string(state.mode))
        LOGGER.debug("%s: %d", GSM_BAND, state.band_gsm)
        LOGGER.debug("%s: %d", UMTS_BAND, state.band_umts)


def _load_band(settings: dict[str, Any], key: str, band_type: type[GsmBand] | type[UmtsBand]) -> Any:
    raw = settings.get(key)
    try:
        if isinstance(raw, bool):
            raise ValueError(raw)
        return band_type(int(raw))
    except (TypeError, ValueError):
        settings[key] = int(band_type.ANY)
        return band_type.ANY


def _migrate_mode(text: str) -> RatMode:
    try:
        tag = Technology(int(text))
    except ValueError:
        LOGGER.warning("Unrecognized %s '%s', using any", TECHNOLOGY_PREFERENCE, text)
        return NO_PREFERENCE
    if tag != Technology.ANY and tag not in LEGACY_TECHNOLOGIES:
        LOGGER.warning("Unrecognized %s '%s', using any", TECHNOLOGY_PREFERENCE, text)
        return NO_PREFERENCE
    return legacy_mode(tag)
