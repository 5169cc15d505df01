"""Synthesize backing storage and accessors for an annotated property."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from macrofy.syntax import (
    AccessorDecl,
    AccessorKind,
    Argument,
    Attribute,
    Binding,
    Declaration,
    IdentifierPattern,
    Member,
    PropertyDecl,
    StorageDecl,
    SynthesizedDeclarations,
)

from .classifier import PROJECTED_VALUE, WRAPPED_VALUE
from .config import WrapperConfig
from .diagnostics import Diagnostic, DiagnosticId, ExpansionContext

logger = logging.getLogger(__name__)

STORAGE_PREFIX = "_"
PROJECTION_PREFIX = "projected_"
INITIAL_VALUE_LABEL = "wrapped_value"

Target = Union[Member, Declaration]


@dataclass(frozen=True)
class SynthesisResult:
    declarations: SynthesizedDeclarations = field(default_factory=SynthesizedDeclarations)
    diagnostic: Optional[Diagnostic] = None

    @property
    def ok(self) -> bool:
        return self.diagnostic is None


def storage_name(identifier: str) -> str:
    return f"{STORAGE_PREFIX}{identifier}"


def projected_name(identifier: str) -> str:
    """Prefix ``identifier`` with the projection marker.

    Leading underscores stay in front so the projected property keeps the
    visibility of the original one.
    """

    bare = identifier.lstrip("_")
    underscores = identifier[: len(identifier) - len(bare)]
    return f"{underscores}{PROJECTION_PREFIX}{bare}"


def placeholder(target: Target) -> SynthesizedDeclarations:
    """Inert getter keeping the host tree valid after a failed expansion."""

    name = target.display_name() if isinstance(target, Member) else target.name
    return SynthesizedDeclarations(accessors=(AccessorDecl(kind=AccessorKind.GET, property_name=name),))


def construction_arguments(attribute: Attribute, member: Member) -> tuple[Argument, ...]:
    """Initializer first, then the attribute's own arguments in source order.

    The initializer is passed by keyword only when every attribute argument
    is a keyword; otherwise it leads the positional arguments.
    """

    arguments = []
    if member.initializer is not None:
        positional = any(not argument.is_keyword() for argument in attribute.arguments)
        label = None if positional else INITIAL_VALUE_LABEL
        arguments.append(Argument(value=member.initializer, label=label))
    arguments.extend(attribute.arguments)
    return tuple(arguments)


def synthesize(config: WrapperConfig, attribute: Attribute, target: Target) -> SynthesisResult:
    """Build the storage, accessors and optional projected property for ``target``."""

    identifier = _single_identifier(target)
    if identifier is None:
        return SynthesisResult(
            declarations=placeholder(target),
            diagnostic=Diagnostic.create(DiagnosticId.UNEXPECTED_TARGET_SHAPE, attribute),
        )
    assert isinstance(target, Member)

    storage = storage_name(identifier)
    binding = Binding.MUTABLE if config.storage_is_mutable() else Binding.IMMUTABLE
    peers: list = [
        StorageDecl(
            name=storage,
            binding=binding,
            wrapper_type=config.wrapper_type_for(attribute),
            arguments=construction_arguments(attribute, target),
        )
    ]

    accessors = [
        AccessorDecl(AccessorKind.GET, identifier, storage, WRAPPED_VALUE, target.type_annotation),
    ]
    if config.wrapped_value_is_settable:
        accessors.append(AccessorDecl(AccessorKind.SET, identifier, storage, WRAPPED_VALUE, target.type_annotation))

    if config.projected_value_type is not None:
        projected = projected_name(identifier)
        projected_accessors = [
            AccessorDecl(AccessorKind.GET, projected, storage, PROJECTED_VALUE, config.projected_value_type),
        ]
        if config.projected_value_is_settable:
            projected_accessors.append(
                AccessorDecl(AccessorKind.SET, projected, storage, PROJECTED_VALUE, config.projected_value_type)
            )
        peers.append(PropertyDecl(projected, config.projected_value_type, tuple(projected_accessors)))

    logger.debug("Synthesized %s via %s (%s storage)", identifier, attribute.name, binding.value)
    return SynthesisResult(declarations=SynthesizedDeclarations(accessors=tuple(accessors), peers=tuple(peers)))


def expand_property(
    config: WrapperConfig,
    attribute: Attribute,
    target: Target,
    context: ExpansionContext,
) -> SynthesizedDeclarations:
    """Accessor/peer expansion entry point; reports failures to ``context``."""

    result = synthesize(config, attribute, target)
    if result.diagnostic is not None:
        context.diagnose(result.diagnostic)
    return result.declarations


def _single_identifier(target: Target) -> Optional[str]:
    if not isinstance(target, Member):
        return None
    if len(target.patterns) != 1:
        return None
    pattern = target.patterns[0]
    if not isinstance(pattern, IdentifierPattern):
        return None
    return pattern.name
