from __future__ import annotations

import pytest

from radioctl.core.model import LegacyMode, ModernMode, Technology
from radioctl.core.rat import (
    access_modes_from_string,
    access_modes_to_string,
    build_legacy_rat_table,
    default_legacy_rat_mapping,
    legacy_mode_from_string,
    rat_mode_to_string,
    split_technologies,
    sticky_mode,
)

GSM, UMTS, LTE = Technology.GSM, Technology.UMTS, Technology.LTE


def test_legacy_table_picks_richest_mode_per_tier() -> None:
    table = build_legacy_rat_table([1, 2, 3, 4, 5, 6, 7])
    assert dict(table) == {GSM: 1, UMTS: 3, LTE: 7}


def test_legacy_table_omits_tiers_without_candidate() -> None:
    table = build_legacy_rat_table([UMTS | GSM, LTE | UMTS])
    assert GSM not in table
    assert table[UMTS] == UMTS | GSM
    assert table[LTE] == LTE | UMTS


def test_legacy_table_is_read_only() -> None:
    table = build_legacy_rat_table([GSM])
    with pytest.raises(TypeError):
        table[UMTS] = UMTS  # type: ignore[index]


def test_legacy_table_empty_when_no_modes() -> None:
    assert dict(build_legacy_rat_table([])) == {}


def test_default_mapping_allows_lower_technologies() -> None:
    assert default_legacy_rat_mapping(GSM) == GSM
    assert default_legacy_rat_mapping(UMTS) == UMTS | GSM
    assert default_legacy_rat_mapping(LTE) == Technology.ALL


def test_access_modes_to_string_orders_most_capable_first() -> None:
    assert access_modes_to_string(Technology.ANY) == "any"
    assert access_modes_to_string(GSM) == "+gsm"
    assert access_modes_to_string(UMTS | GSM) == "+umts+gsm"
    assert access_modes_to_string(LTE | UMTS | GSM) == "+lte+umts+gsm"
    assert access_modes_to_string(LTE | GSM) == "+lte+gsm"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("+gsm", GSM),
        ("+gsm+lte", LTE | GSM),
        ("+lte+umts+gsm", Technology.ALL),
        ("+lte+any", Technology.ANY),
        ("lte", None),
        ("+5g", None),
        ("", None),
    ],
)
def test_access_modes_from_string(text: str, expected: Technology | None) -> None:
    assert access_modes_from_string(text) == expected


def test_legacy_mode_strings() -> None:
    assert legacy_mode_from_string("umts") == UMTS
    assert legacy_mode_from_string("any") == Technology.ANY
    assert legacy_mode_from_string("UMTS") is None
    assert rat_mode_to_string(LegacyMode(LTE)) == "lte"
    assert rat_mode_to_string(ModernMode(LTE)) == "+lte"


def test_split_technologies_least_significant_first() -> None:
    assert split_technologies(LTE | GSM) == (GSM, LTE)
    assert split_technologies(0x0F) == (GSM, UMTS, LTE)
    assert split_technologies(0) == ()


def test_sticky_mode_keeps_legacy_tag_while_it_maps_to_report() -> None:
    table = build_legacy_rat_table([1, 3, 7])
    assert sticky_mode(LegacyMode(UMTS), UMTS | GSM, table.get) == LegacyMode(UMTS)


def test_sticky_mode_switches_to_mask_when_mapping_differs() -> None:
    table = build_legacy_rat_table([1, 3, 7])
    assert sticky_mode(LegacyMode(GSM), UMTS | GSM, table.get) == ModernMode(UMTS | GSM)
    assert sticky_mode(ModernMode(GSM), GSM, table.get) == ModernMode(GSM)
