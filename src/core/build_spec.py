"""Typed build-spec parsing for per-application cache settings.

This module loads and validates YAML build-spec files that override the
build-tool command and per-ecosystem commands. One strict schema keeps
typos from silently falling back to defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Sequence, cast

import yaml

from core.constants import BUILD_SPEC_VERSION
from core.errors import BuildSpecError
from core.types import Ecosystem

_COMMAND_FIELDS = ("install", "prune", "rebuild")
_ECOSYSTEM_FIELDS = {"install", "prune", "rebuild", "tracks_version", "manifest", "working_tree"}


@dataclass(frozen=True)
class EcosystemOverride:
    """Per-ecosystem values overriding built-in defaults.

    ``rebuild_disabled`` distinguishes an explicit ``rebuild: null`` from
    an omitted field.
    """

    install_command: tuple[str, ...] | None = None
    prune_command: tuple[str, ...] | None = None
    rebuild_command: tuple[str, ...] | None = None
    rebuild_disabled: bool = False
    tracks_version: bool | None = None
    manifest_file: str | None = None
    working_tree: str | None = None


@dataclass(frozen=True)
class BuildSpec:
    """Validated build-spec root object."""

    version: int
    build_command: tuple[str, ...] | None = None
    ecosystems: Mapping[Ecosystem, EcosystemOverride] = field(default_factory=dict)


def load_build_spec(spec_path: str) -> BuildSpec:
    """Load and validate a YAML build-spec from disk.

    Args:
        spec_path: File path to YAML build-spec.

    Returns:
        Fully validated build-spec object.

    Raises:
        BuildSpecError: If file is invalid or schema checks fail.
    """
    payload = _load_yaml_payload(spec_path)
    root_mapping = _expect_mapping(payload, "build spec root")
    _validate_root_keys(root_mapping)
    version = _parse_version(root_mapping)
    build_command = _optional_command(root_mapping, "build_command", "build spec")
    ecosystems = _parse_ecosystems(root_mapping)
    return BuildSpec(version=version, build_command=build_command, ecosystems=ecosystems)


def _load_yaml_payload(spec_path: str) -> object:
    spec_file = Path(spec_path).expanduser().resolve()
    if not spec_file.exists():
        raise BuildSpecError(
            f"Build spec file does not exist at {spec_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(spec_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise BuildSpecError(
            f"Failed to read build spec at {spec_file}: {error}. Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise BuildSpecError(
            f"Failed to parse YAML build spec at {spec_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise BuildSpecError(f"Build spec at {spec_file} is empty. Define at least 'version'.")
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise BuildSpecError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise BuildSpecError(f"Invalid {context}: expected object mapping, got {type(value).__name__}.")


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    raw_version = root_mapping.get("version")
    if not isinstance(raw_version, int) or isinstance(raw_version, bool):
        raise BuildSpecError(
            f"Build spec field 'version' must be an integer. Set version: {BUILD_SPEC_VERSION}."
        )
    if raw_version != BUILD_SPEC_VERSION:
        raise BuildSpecError(
            f"Unsupported build spec version {raw_version}. Use version: {BUILD_SPEC_VERSION}."
        )
    return raw_version


def _parse_ecosystems(root_mapping: Mapping[str, object]) -> dict[Ecosystem, EcosystemOverride]:
    raw_ecosystems = root_mapping.get("ecosystems")
    if raw_ecosystems is None:
        return {}
    ecosystems_mapping = _expect_mapping(raw_ecosystems, "build spec ecosystems")
    overrides: dict[Ecosystem, EcosystemOverride] = {}
    for name, raw_override in ecosystems_mapping.items():
        ecosystem = _parse_ecosystem_name(name)
        overrides[ecosystem] = _parse_override(raw_override, f"ecosystem '{name}'")
    return overrides


def _parse_ecosystem_name(name: str) -> Ecosystem:
    try:
        return Ecosystem(name)
    except ValueError as error:
        supported_rows = ", ".join(member.value for member in Ecosystem)
        raise BuildSpecError(
            f"Unsupported ecosystem '{name}' in build spec. Use one of: {supported_rows}."
        ) from error


def _parse_override(raw_override: object, context: str) -> EcosystemOverride:
    override_mapping = _expect_mapping(raw_override, context)
    unknown_keys = sorted(set(override_mapping) - _ECOSYSTEM_FIELDS)
    if unknown_keys:
        raise BuildSpecError(f"Invalid {context}: unknown fields {', '.join(unknown_keys)}.")
    commands = {
        name: _optional_command(override_mapping, name, context) for name in _COMMAND_FIELDS
    }
    rebuild_disabled = "rebuild" in override_mapping and override_mapping["rebuild"] is None
    return EcosystemOverride(
        install_command=commands["install"],
        prune_command=commands["prune"],
        rebuild_command=commands["rebuild"],
        rebuild_disabled=rebuild_disabled,
        tracks_version=_optional_bool(override_mapping, "tracks_version", context),
        manifest_file=_optional_string(override_mapping, "manifest", context),
        working_tree=_optional_string(override_mapping, "working_tree", context),
    )


def _optional_command(
    mapping: Mapping[str, object],
    field_name: str,
    context: str,
) -> tuple[str, ...] | None:
    raw_value = mapping.get(field_name)
    if raw_value is None:
        return None
    if not isinstance(raw_value, Sequence) or isinstance(raw_value, (str, bytes, bytearray)):
        raise BuildSpecError(
            f"Invalid {context}: field '{field_name}' must be a list of strings."
        )
    if len(raw_value) == 0 or not all(isinstance(part, str) and part for part in raw_value):
        raise BuildSpecError(
            f"Invalid {context}: field '{field_name}' must be a non-empty list of strings."
        )
    return tuple(cast(Sequence[str], raw_value))


def _optional_bool(mapping: Mapping[str, object], field_name: str, context: str) -> bool | None:
    raw_value = mapping.get(field_name)
    if raw_value is None or isinstance(raw_value, bool):
        return raw_value
    raise BuildSpecError(f"Invalid {context}: field '{field_name}' must be true or false.")


def _optional_string(mapping: Mapping[str, object], field_name: str, context: str) -> str | None:
    raw_value = mapping.get(field_name)
    if raw_value is None:
        return None
    if isinstance(raw_value, str) and raw_value.strip():
        return raw_value.strip()
    raise BuildSpecError(f"Invalid {context}: field '{field_name}' must be a non-empty string.")


def _validate_root_keys(root_mapping: Mapping[str, object]) -> None:
    allowed_keys = {"version", "build_command", "ecosystems"}
    unknown_keys = sorted(set(root_mapping) - allowed_keys)
    if unknown_keys:
        raise BuildSpecError(
            f"Build spec contains unknown root fields: {', '.join(unknown_keys)}."
        )
