"""Core data models used across drivers, settings, loader, and CLI."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any


class Technology(enum.IntFlag):
    ANY = 0
    GSM = 0x1
    UMTS = 0x2
    LTE = 0x4
    ALL = GSM | UMTS | LTE


LEGACY_TECHNOLOGIES: tuple[Technology, ...] = (
    Technology.GSM,
    Technology.UMTS,
    Technology.LTE,
)


@dataclass(frozen=True)
class LegacyMode:
    """Single-technology preference as understood by legacy clients."""

    tag: Technology


@dataclass(frozen=True)
class ModernMode:
    """Preference expressed as a set of technologies."""

    mask: Technology


RatMode = LegacyMode | ModernMode

NO_PREFERENCE = ModernMode(Technology.ANY)


def legacy_mode(tag: Technology) -> RatMode:
    # "any" carries no technology, both encodings mean the same thing
    if tag == Technology.ANY:
        return NO_PREFERENCE
    return LegacyMode(tag)


class GsmBand(enum.IntEnum):
    ANY = 0
    BAND_850 = 1
    BAND_900P = 2
    BAND_900E = 3
    BAND_1800 = 4
    BAND_1900 = 5

    @property
    def label(self) -> str:
        return _GSM_BAND_LABELS[self]

    @classmethod
    def from_label(cls, label: str) -> GsmBand | None:
        for band, text in _GSM_BAND_LABELS.items():
            if text == label:
                return band
        return None


class UmtsBand(enum.IntEnum):
    ANY = 0
    BAND_850 = 1
    BAND_900 = 2
    BAND_1700AWS = 3
    BAND_1900 = 4
    BAND_2100 = 5

    @property
    def label(self) -> str:
        return _UMTS_BAND_LABELS[self]

    @classmethod
    def from_label(cls, label: str) -> UmtsBand | None:
        for band, text in _UMTS_BAND_LABELS.items():
            if text == label:
                return band
        return None


_GSM_BAND_LABELS = {
    GsmBand.ANY: "any",
    GsmBand.BAND_850: "850",
    GsmBand.BAND_900P: "900P",
    GsmBand.BAND_900E: "900E",
    GsmBand.BAND_1800: "1800",
    GsmBand.BAND_1900: "1900",
}

_UMTS_BAND_LABELS = {
    UmtsBand.ANY: "any",
    UmtsBand.BAND_850: "850",
    UmtsBand.BAND_900: "900",
    UmtsBand.BAND_1700AWS: "1700AWS",
    UmtsBand.BAND_1900: "1900",
    UmtsBand.BAND_2100: "2100",
}


class Capability(enum.Flag):
    NONE = 0
    QUERY_BAND = enum.auto()
    SET_BAND = enum.auto()
    QUERY_FAST_DORMANCY = enum.auto()
    SET_FAST_DORMANCY = enum.auto()
    QUERY_RAT_MODE = enum.auto()
    SET_RAT_MODE = enum.auto()
    QUERY_AVAILABLE_RATS = enum.auto()
    QUERY_AVAILABLE_RAT_MODES = enum.auto()
    MAP_LEGACY_RAT_MODE = enum.auto()


@dataclass
class SettingsState:
    """Confirmed and pending radio configuration of one modem."""

    mode: RatMode = NO_PREFERENCE
    pending_mode: RatMode = NO_PREFERENCE
    band_gsm: GsmBand = GsmBand.ANY
    pending_band_gsm: GsmBand = GsmBand.ANY
    band_umts: UmtsBand = UmtsBand.ANY
    pending_band_umts: UmtsBand = UmtsBand.ANY
    fast_dormancy: bool = False
    pending_fast_dormancy: bool = False
    available_modes: tuple[Technology, ...] | None = None
    cached: bool = False


@dataclass(frozen=True)
class ModemSpec:
    techs: Technology
    supported_modes: tuple[Technology, ...]
    pref_mode: Technology = Technology.ANY
    band_gsm: GsmBand = GsmBand.ANY
    band_umts: UmtsBand = UmtsBand.ANY
    fast_dormancy: bool = False
    failures: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class ModemProfile:
    id: str
    name: str
    driver: str
    imsi: str | None
    modem: ModemSpec


@dataclass(frozen=True)
class PropertySnapshot:
    profile: ModemProfile
    properties: dict[str, Any]


@dataclass(frozen=True)
class ChangeResult:
    profile: ModemProfile
    name: str
    value: Any
    changes: tuple[tuple[str, Any], ...]
    properties: dict[str, Any]
