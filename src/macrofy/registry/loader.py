"""YAML loader and validation for wrapper registry files."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

import yaml
from jsonschema import Draft7Validator

from macrofy.core.config import WrapperConfig

from .registry import WrapperRegistry, load_builtins, registry

logger = logging.getLogger(__name__)

WRAPPER_NAME_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$"

REGISTRY_SCHEMA = {
    "type": "object",
    "required": ["wrappers"],
    "additionalProperties": False,
    "properties": {
        "include_builtins": {"type": "boolean"},
        "wrappers": {
            "type": "object",
            "propertyNames": {"pattern": WRAPPER_NAME_PATTERN},
            "additionalProperties": {
                "type": ["object", "null"],
                "additionalProperties": False,
                "properties": {
                    "wrapped_value_is_settable": {"type": "boolean"},
                    "projected_value_is_settable": {"type": "boolean"},
                    "is_reference_type": {"type": "boolean"},
                    "wrapper_type": {"type": "string", "minLength": 1},
                    "projected_value_type": {"type": "string", "minLength": 1},
                },
            },
        },
    },
}
_validator = Draft7Validator(REGISTRY_SCHEMA)


@dataclass(frozen=True)
class RegistryFile:
    path: Path
    include_builtins: bool = True
    wrappers: Tuple[Tuple[str, WrapperConfig], ...] = field(default_factory=tuple)


def load_registry_file(path: str) -> RegistryFile:
    """Load and validate a registry file."""

    registry_path = Path(path).expanduser().resolve()
    raw = yaml.safe_load(registry_path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, Mapping):
        raise ValueError("Registry file must contain a mapping at the top level")
    errors = sorted(_validator.iter_errors(raw), key=lambda e: list(e.path))
    if errors:
        messages = "; ".join(f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors)
        raise ValueError(f"Registry schema validation failed: {messages}")
    wrappers = tuple(_parse_wrapper(name, entry) for name, entry in (raw.get("wrappers") or {}).items())
    logger.debug("Loaded %d wrapper(s) from %s", len(wrappers), registry_path)
    return RegistryFile(
        path=registry_path,
        include_builtins=bool(raw.get("include_builtins", True)),
        wrappers=wrappers,
    )


def build_registry(path: Optional[str] = None, *, include_builtins: bool = True) -> WrapperRegistry:
    """Assemble built-ins, plugin registrations and an optional registry file."""

    loaded = load_registry_file(path) if path else None
    result = WrapperRegistry()
    if include_builtins and (loaded is None or loaded.include_builtins):
        load_builtins(result)
    for name, config in registry.items():
        result.update_or_register(name, config)
    if loaded is not None:
        for name, config in loaded.wrappers:
            result.update_or_register(name, config)
    return result


def _parse_wrapper(name: str, entry: Any) -> Tuple[str, WrapperConfig]:
    if entry is not None and not isinstance(entry, Mapping):
        raise ValueError(f"Wrapper '{name}' must be a mapping")
    return name, WrapperConfig.from_mapping(entry)
