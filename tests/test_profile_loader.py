from __future__ import annotations

from pathlib import Path

import pytest

from radioctl.core.errors import ProfileValidationError
from radioctl.core.model import GsmBand, Technology, UmtsBand
from radioctl.core.profile_loader import load_profiles


def _write_profile(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _user_profile(tmp_path: Path, name: str) -> Path:
    return tmp_path / "cfg" / "radioctl" / "profiles" / name


def test_load_packaged_profiles() -> None:
    loaded = load_profiles()
    assert {"ril_lte", "at_3g"} <= set(loaded.profiles)
    assert loaded.warnings == ()

    ril = loaded.profiles["ril_lte"]
    assert ril.driver == "ril"
    assert ril.imsi == "244120000000001"
    assert ril.modem.techs == Technology.ALL
    assert ril.modem.supported_modes == (
        Technology.GSM,
        Technology.UMTS | Technology.GSM,
        Technology.ALL,
    )

    legacy = loaded.profiles["at_3g"]
    assert legacy.modem.techs == Technology.GSM | Technology.UMTS
    assert legacy.modem.pref_mode == Technology.ANY
    assert legacy.modem.fast_dormancy is False


def test_user_profile_with_bands_and_failures(tmp_path: Path) -> None:
    _write_profile(
        _user_profile(tmp_path, "flaky.yaml"),
        """
id: flaky_modem
name: Flaky modem
driver: legacy
modem:
  techs: [gsm, umts]
  pref_mode: umts
  band_gsm: 1800
  band_umts: "1700AWS"
  fast_dormancy: true
  failures: [set_band]
""",
    )

    profile = load_profiles().profiles["flaky_modem"]
    assert profile.imsi is None
    assert profile.modem.pref_mode == Technology.UMTS
    assert profile.modem.band_gsm == GsmBand.BAND_1800
    assert profile.modem.band_umts == UmtsBand.BAND_1700AWS
    assert profile.modem.fast_dormancy is True
    assert profile.modem.failures == frozenset({"set_band"})


def test_profiles_in_data_dir_are_loaded(tmp_path: Path) -> None:
    _write_profile(
        tmp_path / "data" / "radioctl" / "profiles" / "data.yml",
        """
id: from_data
name: From data dir
driver: ril
modem:
  techs: [gsm]
  supported_modes: ["+gsm"]
""",
    )

    assert "from_data" in load_profiles().profiles


def test_missing_required_keys_rejected(tmp_path: Path) -> None:
    _write_profile(
        _user_profile(tmp_path, "missing.yaml"),
        """
id: missing
name: Missing
modem:
  techs: [gsm]
""",
    )

    with pytest.raises(ProfileValidationError):
        load_profiles()


def test_unknown_band_rejected(tmp_path: Path) -> None:
    _write_profile(
        _user_profile(tmp_path, "band.yaml"),
        """
id: bad_band
name: Bad band
driver: legacy
modem:
  techs: [gsm]
  band_gsm: "700"
""",
    )

    with pytest.raises(ProfileValidationError, match="band_gsm"):
        load_profiles()


def test_mode_outside_techs_rejected(tmp_path: Path) -> None:
    _write_profile(
        _user_profile(tmp_path, "modes.yaml"),
        """
id: bad_modes
name: Bad modes
driver: ril
modem:
  techs: [gsm, umts]
  supported_modes: ["+gsm", "+lte+gsm"]
""",
    )

    with pytest.raises(ProfileValidationError, match="outside modem.techs"):
        load_profiles()


def test_invalid_mode_combination_rejected(tmp_path: Path) -> None:
    _write_profile(
        _user_profile(tmp_path, "combo.yaml"),
        """
id: bad_combo
name: Bad combination
driver: ril
modem:
  techs: [gsm]
  supported_modes: ["+gsm+wifi"]
""",
    )

    with pytest.raises(ProfileValidationError, match="technology combination"):
        load_profiles()


def test_user_profile_override_packaged(tmp_path: Path) -> None:
    _write_profile(
        _user_profile(tmp_path, "override.yaml"),
        """
id: at_3g
name: User Override
driver: legacy
modem:
  techs: [gsm]
""",
    )

    loaded = load_profiles()
    assert loaded.profiles["at_3g"].name == "User Override"
    assert loaded.profiles["at_3g"].modem.techs == Technology.GSM
    assert any("overrides" in warning for warning in loaded.warnings)


def test_duplicate_yaml_keys_rejected(tmp_path: Path) -> None:
    _write_profile(
        _user_profile(tmp_path, "dup.yaml"),
        """
id: dup
name: Duplicate
driver: legacy
modem:
  techs: [gsm]
  band_gsm: "850"
  band_gsm: "1900"
""",
    )

    with pytest.raises(ProfileValidationError, match="Duplicate key"):
        load_profiles()


def test_non_mapping_document_rejected(tmp_path: Path) -> None:
    _write_profile(_user_profile(tmp_path, "list.yaml"), "- just\n- a list\n")

    with pytest.raises(ProfileValidationError, match="mapping at root"):
        load_profiles()
