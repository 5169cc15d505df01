"""Derive a wrapper config from a wrapper type's declaration."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from macrofy.syntax import REFERENCE_KINDS, SUPPORTED_KINDS, Attribute, Declaration

from .classifier import PROJECTED_VALUE, WRAPPED_VALUE, find_member, is_settable
from .config import ConfigDeclaration, WrapperConfig, config_name_for
from .diagnostics import Diagnostic, DiagnosticId, ExpansionContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntrospectionResult:
    config: Optional[WrapperConfig] = None
    diagnostic: Optional[Diagnostic] = None

    @property
    def ok(self) -> bool:
        return self.diagnostic is None and self.config is not None


def introspect(declaration: Declaration, attribute: Optional[Attribute] = None) -> IntrospectionResult:
    """Analyze ``declaration``'s members into a :class:`WrapperConfig`.

    Only an unsupported declaration kind or a missing ``wrapped_value``
    member fail; anything else falls back to the config defaults.
    """

    if declaration.kind not in SUPPORTED_KINDS:
        return _failure(DiagnosticId.UNSUPPORTED_DECLARATION_KIND, attribute)

    wrapped = find_member(declaration.members, WRAPPED_VALUE)
    if wrapped is None:
        return _failure(DiagnosticId.MISSING_WRAPPED_VALUE_MEMBER, attribute)

    projected = find_member(declaration.members, PROJECTED_VALUE)
    projected_type = None
    projected_settable = False
    if projected is not None:
        # Without an explicit annotation the projected accessor is omitted;
        # no type inference happens here.
        projected_type = projected.type_annotation
        projected_settable = is_settable(projected)

    config = WrapperConfig(
        wrapped_value_is_settable=is_settable(wrapped),
        projected_value_is_settable=projected_settable,
        is_reference_type=declaration.kind in REFERENCE_KINDS,
        projected_value_type=projected_type,
    )
    logger.debug("Introspected %s (%s): %s", declaration.name, declaration.kind.value, config)
    return IntrospectionResult(config=config)


def config_declaration(declaration: Declaration, config: WrapperConfig) -> ConfigDeclaration:
    return ConfigDeclaration(
        name=config_name_for(declaration.name),
        config=config,
        source_name=declaration.name,
    )


def expand_wrapper(
    attribute: Attribute,
    declaration: Declaration,
    context: ExpansionContext,
) -> List[ConfigDeclaration]:
    """Introspection expansion entry point; reports failures to ``context``."""

    result = introspect(declaration, attribute)
    if result.diagnostic is not None:
        context.diagnose(result.diagnostic)
        return []
    assert result.config is not None
    return [config_declaration(declaration, result.config)]


def _failure(diagnostic_id: DiagnosticId, attribute: Optional[Attribute]) -> IntrospectionResult:
    return IntrospectionResult(diagnostic=Diagnostic.create(diagnostic_id, attribute))
