"""Configuration model describing how accessors are synthesized for a wrapper."""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional, Tuple

from macrofy.syntax import Attribute

CONFIG_SUFFIX = "Macro"

# Rendering order of the non-default facts in a generated config declaration.
FACT_ORDER = (
    "projected_value_type",
    "is_reference_type",
    "wrapped_value_is_settable",
    "projected_value_is_settable",
    "wrapper_type",
)


@dataclass(frozen=True)
class WrapperConfig:
    """Derived or hand-authored facts about a wrapper type.

    Every field has a default, so a config only has to spell out what is
    unusual about its wrapper. ``wrapper_type`` left as ``None`` means the
    attribute's own name is the type to construct.
    """

    wrapped_value_is_settable: bool = False
    projected_value_is_settable: bool = False
    is_reference_type: bool = False
    wrapper_type: Optional[str] = None
    projected_value_type: Optional[str] = None

    def wrapper_type_for(self, attribute: Attribute) -> str:
        return self.wrapper_type or attribute.name

    def storage_is_mutable(self) -> bool:
        # Reference wrappers are mutated through the instance, never rebound.
        if self.is_reference_type:
            return False
        return self.wrapped_value_is_settable or self.projected_value_is_settable

    def non_default_facts(self) -> Tuple[Tuple[str, Any], ...]:
        defaults = WrapperConfig()
        facts = []
        for name in FACT_ORDER:
            value = getattr(self, name)
            if value != getattr(defaults, name):
                facts.append((name, value))
        return tuple(facts)

    def to_mapping(self) -> Dict[str, Any]:
        return dict(self.non_default_facts())

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "WrapperConfig":
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown wrapper config field(s): {', '.join(unknown)}")
        projected_type = data.get("projected_value_type")
        wrapper_type = data.get("wrapper_type")
        return cls(
            wrapped_value_is_settable=bool(data.get("wrapped_value_is_settable", False)),
            projected_value_is_settable=bool(data.get("projected_value_is_settable", False)),
            is_reference_type=bool(data.get("is_reference_type", False)),
            wrapper_type=str(wrapper_type) if wrapper_type is not None else None,
            projected_value_type=str(projected_type) if projected_type is not None else None,
        )


DEFAULT_CONFIG = WrapperConfig()


@dataclass(frozen=True)
class ConfigDeclaration:
    """Generated declaration binding ``name`` to a wrapper config."""

    name: str
    config: WrapperConfig
    source_name: str = ""

    @property
    def facts(self) -> Tuple[Tuple[str, Any], ...]:
        return self.config.non_default_facts()


def config_name_for(type_name: str) -> str:
    return f"{type_name}{CONFIG_SUFFIX}"
