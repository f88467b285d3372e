from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any

import pytest

from radioctl.core.errors import DriverFailureError
from radioctl.core.model import Capability, GsmBand, Technology, UmtsBand
from radioctl.drivers.base import RadioSettingsDriver

MODE_CAPS = Capability.QUERY_RAT_MODE | Capability.SET_RAT_MODE
LEGACY_CAPS = (
    MODE_CAPS
    | Capability.QUERY_BAND
    | Capability.SET_BAND
    | Capability.QUERY_FAST_DORMANCY
    | Capability.SET_FAST_DORMANCY
    | Capability.QUERY_AVAILABLE_RATS
)
MASK_CAPS = MODE_CAPS | Capability.QUERY_AVAILABLE_RAT_MODES | Capability.QUERY_AVAILABLE_RATS


class FakeDriver(RadioSettingsDriver):
    name = "fake"

    def __init__(
        self,
        capabilities: Capability,
        *,
        rat_mode: Technology = Technology.ANY,
        modes: Iterable[int] = (),
        rats: Technology = Technology.ALL,
        band: tuple[GsmBand, UmtsBand] = (GsmBand.ANY, UmtsBand.ANY),
        fast_dormancy: bool = False,
        legacy_map: Mapping[Technology, Technology] | None = None,
        fail: Iterable[str] = (),
    ) -> None:
        self.capabilities = capabilities
        self.rat_mode = rat_mode
        self.modes = tuple(Technology(m) for m in modes)
        self.rats = rats
        self.band = band
        self.fast_dormancy = fast_dormancy
        self.legacy_map = dict(legacy_map or {})
        self.fail = set(fail)
        self.calls: list[tuple[str, Any]] = []
        self.events: list[tuple[str, str, Any]] = []
        self.removed = False

    async def _complete(self, operation: str, arg: Any = None) -> None:
        self.calls.append((operation, arg))
        self.events.append(("start", operation, arg))
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        self.events.append(("end", operation, arg))
        if operation in self.fail:
            raise DriverFailureError(f"{operation} failed")

    async def query_band(self) -> tuple[GsmBand, UmtsBand]:
        await self._complete("query_band")
        return self.band

    async def set_band(self, band_gsm: GsmBand, band_umts: UmtsBand) -> None:
        await self._complete("set_band", (band_gsm, band_umts))
        self.band = (band_gsm, band_umts)

    async def query_fast_dormancy(self) -> bool:
        await self._complete("query_fast_dormancy")
        return self.fast_dormancy

    async def set_fast_dormancy(self, enable: bool) -> None:
        await self._complete("set_fast_dormancy", enable)
        self.fast_dormancy = enable

    async def query_rat_mode(self) -> Technology:
        await self._complete("query_rat_mode")
        return self.rat_mode

    async def set_rat_mode(self, mode: Technology) -> None:
        await self._complete("set_rat_mode", mode)
        self.rat_mode = mode

    async def query_available_rats(self) -> Technology:
        await self._complete("query_available_rats")
        return self.rats

    async def query_available_rat_modes(self) -> tuple[Technology, ...]:
        await self._complete("query_available_rat_modes")
        return self.modes

    def map_legacy_rat_mode(self, tag: Technology) -> Technology:
        return self.legacy_map.get(tag, Technology.ANY)

    def remove(self) -> None:
        self.removed = True

    def operations(self) -> list[str]:
        return [operation for operation, _ in self.calls]


@pytest.fixture(autouse=True)
def _isolated_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
