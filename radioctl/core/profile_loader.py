"""Profile loading and validation for YAML-described simulated modems."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from radioctl.core.errors import ProfileLoadError, ProfileValidationError
from radioctl.core.model import GsmBand, ModemProfile, ModemSpec, Technology, UmtsBand
from radioctl.core.rat import access_modes_from_string, legacy_mode_from_string

LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag != "tag:yaml.org,2002:bool"
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ProfileValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LoadedProfiles:
    profiles: dict[str, ModemProfile]
    warnings: tuple[str, ...]


def _load_schema_validator() -> Any:
    schema_text = resources.files("radioctl.schemas").joinpath("profile.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _profile_dirs() -> tuple[Path, Path]:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_config / "radioctl/profiles", xdg_data / "radioctl/profiles"


def _read_yaml(path: Path | Traversable) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ProfileLoadError(f"Could not read profile file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ProfileValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ProfileValidationError(f"Profile file {path} must contain a mapping at root")
    return loaded


def _normalize_bool(value: Any, *, context: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    raise ProfileValidationError(f"{context} must be boolean true/false")


def _normalize_modes(values: list[str], *, context: str) -> tuple[Technology, ...]:
    modes: list[Technology] = []
    for value in values:
        mode = access_modes_from_string(value)
        if mode is None or mode == Technology.ANY:
            raise ProfileValidationError(f"{context} has invalid technology combination '{value}'")
        modes.append(mode)
    return tuple(modes)


def _normalize_pref_mode(value: str, *, context: str) -> Technology:
    mode = legacy_mode_from_string(value)
    if mode is None:
        mode = access_modes_from_string(value)
    if mode is None:
        raise ProfileValidationError(f"{context} must be a technology or '+' combination, got '{value}'")
    return mode


def _build_profile(doc: dict[str, Any], source: Path | Traversable) -> ModemProfile:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ProfileValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    modem = doc["modem"]
    context = f"{doc['id']}.modem"

    techs = Technology.ANY
    for name in modem["techs"]:
        techs |= legacy_mode_from_string(name)

    supported_modes = _normalize_modes(
        modem.get("supported_modes", []), context=f"{context}.supported_modes"
    )
    for mode in supported_modes:
        if mode & ~techs:
            raise ProfileValidationError(
                f"{context}.supported_modes uses technologies outside modem.techs"
            )

    band_gsm = GsmBand.from_label(str(modem.get("band_gsm", "any")))
    if band_gsm is None:
        raise ProfileValidationError(f"{context}.band_gsm is not a GSM band")
    band_umts = UmtsBand.from_label(str(modem.get("band_umts", "any")))
    if band_umts is None:
        raise ProfileValidationError(f"{context}.band_umts is not a UMTS band")

    return ModemProfile(
        id=doc["id"],
        name=doc["name"],
        driver=doc["driver"],
        imsi=doc.get("imsi"),
        modem=ModemSpec(
            techs=techs,
            supported_modes=supported_modes,
            pref_mode=_normalize_pref_mode(
                str(modem.get("pref_mode", "any")), context=f"{context}.pref_mode"
            ),
            band_gsm=band_gsm,
            band_umts=band_umts,
            fast_dormancy=_normalize_bool(
                modem.get("fast_dormancy", False), context=f"{context}.fast_dormancy"
            ),
            failures=frozenset(modem.get("failures", [])),
        ),
    )


def _iter_packaged_profile_paths() -> list[Traversable]:
    profile_root = resources.files("radioctl.profiles")
    return [item for item in profile_root.iterdir() if item.name.endswith((".yml", ".yaml"))]


def _iter_user_profile_paths() -> list[Path]:
    paths: list[Path] = []
    for directory in _profile_dirs():
        if not directory.exists() or not directory.is_dir():
            continue
        paths.extend(sorted(p for p in directory.iterdir() if p.suffix in {".yml", ".yaml"}))
    return paths


def load_profiles() -> LoadedProfiles:
    profiles: dict[str, ModemProfile] = {}
    warnings: list[str] = []

    for path in sorted(_iter_packaged_profile_paths(), key=lambda p: p.name):
        doc = _read_yaml(path)
        profile = _build_profile(doc, path)
        profiles[profile.id] = profile

    for path in _iter_user_profile_paths():
        doc = _read_yaml(path)
        profile = _build_profile(doc, path)
        if profile.id in profiles:
            warning = f"User profile '{profile.id}' overrides packaged profile"
            LOGGER.warning(warning)
            warnings.append(warning)
        profiles[profile.id] = profile

    return LoadedProfiles(profiles=profiles, warnings=tuple(warnings))
