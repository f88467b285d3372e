from __future__ import annotations

from pathlib import Path

import pytest

from radioctl.api import (
    Client,
    DriverFailureError,
    MemorySettingsStore,
    ProfileSelectionError,
    PropertySnapshot,
    UnsupportedValueError,
)


def test_public_client_list_profiles() -> None:
    client = Client(store=MemorySettingsStore())
    profiles = client.list_profiles()
    assert [p.id for p in profiles] == ["at_3g", "ril_lte"]
    assert client.load_warnings == ()


def test_public_client_requires_profile_choice() -> None:
    client = Client(store=MemorySettingsStore())
    with pytest.raises(ProfileSelectionError, match="Multiple modem profiles"):
        client.get_properties()
    with pytest.raises(ProfileSelectionError, match="Unknown profile"):
        client.get_properties(profile_id="nope")


def test_public_client_properties_of_mask_modem() -> None:
    client = Client(store=MemorySettingsStore())

    snapshot = client.get_properties(profile_id="ril_lte")
    assert isinstance(snapshot, PropertySnapshot)
    assert snapshot.profile.id == "ril_lte"
    assert snapshot.properties == {
        "TechnologyPreference": "any",
        "AvailableTechnologies": ["gsm", "umts", "lte", "+gsm", "+umts+gsm", "+lte+umts+gsm"],
    }


def test_public_client_properties_of_legacy_modem() -> None:
    client = Client(store=MemorySettingsStore())

    snapshot = client.get_properties(profile_id="at_3g")
    assert snapshot.properties == {
        "TechnologyPreference": "any",
        "GsmBand": "any",
        "UmtsBand": "any",
        "FastDormancy": False,
        "AvailableTechnologies": ["gsm", "umts"],
    }


def test_public_client_set_property_is_persisted() -> None:
    store = MemorySettingsStore()
    client = Client(store=store)

    result = client.set_property("TechnologyPreference", "+umts+gsm", profile_id="ril_lte")
    assert result.changes == (("TechnologyPreference", "+umts+gsm"),)
    assert result.properties["TechnologyPreference"] == "+umts+gsm"
    assert store.groups["244120000000001"]["TechnologyPreference"] == "+umts+gsm"

    # A fresh session pushes the stored preference back to the modem
    snapshot = client.get_properties(profile_id="ril_lte")
    assert snapshot.properties["TechnologyPreference"] == "+umts+gsm"

    again = client.set_property("TechnologyPreference", "+umts+gsm", profile_id="ril_lte")
    assert again.changes == ()


def test_public_client_set_band_and_fast_dormancy() -> None:
    store = MemorySettingsStore()
    client = Client(store=store)

    result = client.set_property("GsmBand", "1800", profile_id="at_3g")
    assert result.changes == (("GsmBand", "1800"),)
    assert result.properties["UmtsBand"] == "any"
    assert store.groups["244120000000002"]["GsmBand"] == 4

    result = client.set_property("FastDormancy", True, profile_id="at_3g")
    assert result.changes == (("FastDormancy", True),)
    assert "FastDormancy" not in store.groups["244120000000002"]


def test_public_client_rejects_unsupported_combination() -> None:
    client = Client(store=MemorySettingsStore())
    with pytest.raises(UnsupportedValueError):
        client.set_property("TechnologyPreference", "+lte+gsm", profile_id="ril_lte")


def test_public_client_driver_failure(tmp_path: Path) -> None:
    profile = tmp_path / "cfg" / "radioctl" / "profiles" / "flaky.yaml"
    profile.parent.mkdir(parents=True)
    profile.write_text(
        """
id: flaky
name: Flaky modem
driver: ril
imsi: "244120000000009"
modem:
  techs: [gsm, umts]
  supported_modes: ["+gsm", "+umts+gsm"]
  pref_mode: "+umts+gsm"
  failures: [set_rat_mode]
""",
        encoding="utf-8",
    )
    store = MemorySettingsStore()
    client = Client(store=store)

    snapshot = client.get_properties(profile_id="flaky")
    assert snapshot.properties["TechnologyPreference"] == "+umts+gsm"
    syncs = store.syncs

    with pytest.raises(DriverFailureError):
        client.set_property("TechnologyPreference", "gsm", profile_id="flaky")
    assert store.syncs == syncs
    assert store.groups["244120000000009"]["TechnologyPreference"] == "+umts+gsm"
