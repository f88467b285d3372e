"""Conversions between legacy single-technology tags and technology masks.

Everything in this module is pure: no driver access, no state. The settings
core and the drivers share these helpers so the string forms exposed to
clients and the table a bitmask driver builds at probe time stay consistent.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType

from radioctl.core.model import (
    LEGACY_TECHNOLOGIES,
    LegacyMode,
    ModernMode,
    RatMode,
    Technology,
)

_LEGACY_NAMES = {
    Technology.ANY: "any",
    Technology.GSM: "gsm",
    Technology.UMTS: "umts",
    Technology.LTE: "lte",
}


def legacy_mode_to_string(tag: Technology) -> str | None:
    return _LEGACY_NAMES.get(tag)


def legacy_mode_from_string(value: str) -> Technology | None:
    for tag, name in _LEGACY_NAMES.items():
        if name == value:
            return tag
    return None


def access_modes_to_string(mask: Technology) -> str:
    """Render a technology mask, most capable technology first.

    ``ANY`` renders as ``any``; everything else as ``+lte+umts+gsm`` style so
    it can never be confused with a legacy tag.
    """
    mask = Technology(mask & Technology.ALL)
    if mask == Technology.ANY:
        return "any"
    return "".join(
        f"+{_LEGACY_NAMES[tag]}" for tag in reversed(LEGACY_TECHNOLOGIES) if mask & tag
    )


def access_modes_from_string(value: str) -> Technology | None:
    if not value or not value.startswith("+"):
        return None

    mask = Technology.ANY
    any_seen = False
    for part in value[1:].split("+"):
        tag = legacy_mode_from_string(part)
        if tag is None:
            return None
        if tag == Technology.ANY:
            any_seen = True
        else:
            mask |= tag

    if any_seen:
        return Technology.ANY
    return mask


def rat_mode_to_string(mode: RatMode) -> str:
    if isinstance(mode, LegacyMode):
        return _LEGACY_NAMES[mode.tag]
    return access_modes_to_string(mode.mask)


def default_legacy_rat_mapping(tag: Technology) -> Technology:
    # tag is a single bit: allow it and everything below it
    return Technology((tag | (tag - 1)) & Technology.ALL)


def build_legacy_rat_table(supported_modes: Iterable[int]) -> Mapping[Technology, Technology]:
    """Map each legacy tier to the richest supported mask not above it."""
    modes = tuple(int(mode) for mode in supported_modes)
    table: dict[Technology, Technology] = {}
    tier = 1
    while tier & Technology.ALL:
        # these bits have to be off
        off = ~((tier << 1) - 1)
        best = 0
        for mode in modes:
            if not (mode & off) and mode > best:
                best = mode
        if best:
            table[Technology(tier)] = Technology(best)
        tier <<= 1
    return MappingProxyType(table)


def split_technologies(mask: int) -> tuple[Technology, ...]:
    """Decompose a mask into single technologies, least significant first."""
    mask &= Technology.ALL
    modes: list[Technology] = []
    while mask:
        lowest = mask & -mask
        modes.append(Technology(lowest))
        mask &= mask - 1
    return tuple(modes)


def sticky_mode(
    previous: RatMode,
    reported: Technology,
    map_legacy: Callable[[Technology], Technology],
) -> RatMode:
    """Keep a previously chosen legacy tag while it still maps to the report."""
    if isinstance(previous, LegacyMode) and map_legacy(previous.tag) == reported:
        return previous
    return ModernMode(Technology(reported))
