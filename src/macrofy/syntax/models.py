"""Syntax node dataclasses shared by the core and the host front end."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union


class DeclKind(Enum):
    """Kind of a type-level declaration."""

    VALUE_AGGREGATE = "value-aggregate"
    REFERENCE_CLASS = "reference-class"
    REFERENCE_ACTOR = "reference-actor"
    TAGGED_UNION = "tagged-union"
    # Shapes the introspector refuses.
    PROTOCOL = "protocol"
    FUNCTION = "function"
    STATEMENT = "statement"


SUPPORTED_KINDS = frozenset(
    {
        DeclKind.VALUE_AGGREGATE,
        DeclKind.REFERENCE_CLASS,
        DeclKind.REFERENCE_ACTOR,
        DeclKind.TAGGED_UNION,
    }
)
REFERENCE_KINDS = frozenset({DeclKind.REFERENCE_CLASS, DeclKind.REFERENCE_ACTOR})


class Binding(Enum):
    """Declared mutability specifier of a member."""

    IMMUTABLE = "let"
    MUTABLE = "var"


class AccessorKind(Enum):
    GET = "get"
    SET = "set"
    DELETE = "delete"


@dataclass(frozen=True)
class IdentifierPattern:
    """Binding pattern naming exactly one identifier."""

    name: str


@dataclass(frozen=True)
class DestructuringPattern:
    """Any binding pattern that is not a bare identifier.

    ``names`` lists the identifiers found in the pattern, in source order,
    and ``text`` keeps the pattern as written.
    """

    names: Tuple[str, ...]
    text: str = ""


Pattern = Union[IdentifierPattern, DestructuringPattern]


@dataclass(frozen=True)
class AccessorBlock:
    accessors: Tuple[AccessorKind, ...] = (AccessorKind.GET,)

    @property
    def has_getter(self) -> bool:
        return AccessorKind.GET in self.accessors

    @property
    def has_setter(self) -> bool:
        return AccessorKind.SET in self.accessors


@dataclass(frozen=True)
class Member:
    """A single field/property declaration inside a member list."""

    patterns: Tuple[Pattern, ...]
    binding: Binding = Binding.MUTABLE
    accessor_block: Optional[AccessorBlock] = None
    type_annotation: Optional[str] = None
    initializer: Optional[str] = None
    line: int = 0

    @classmethod
    def named(cls, name: str, **kwargs: object) -> "Member":
        return cls(patterns=(IdentifierPattern(name),), **kwargs)  # type: ignore[arg-type]

    def identifiers(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self.patterns if isinstance(p, IdentifierPattern))

    def display_name(self) -> str:
        for pattern in self.patterns:
            if isinstance(pattern, IdentifierPattern):
                return pattern.name
            if pattern.names:
                return pattern.names[0]
        return "_"


@dataclass(frozen=True)
class Declaration:
    """A type definition (or another declaration carrying an attribute)."""

    kind: DeclKind
    name: str
    members: Tuple[Member, ...] = field(default_factory=tuple)
    line: int = 0


@dataclass(frozen=True)
class Argument:
    """One argument of an attribute or construction call.

    ``value`` is the expression source text. ``label`` is the keyword name,
    or ``None`` for positional and unpacking (``*x`` / ``**x``) arguments.
    """

    value: str
    label: Optional[str] = None

    def is_positional(self) -> bool:
        return self.label is None and not self.value.startswith("*")

    def is_keyword(self) -> bool:
        return self.label is not None or self.value.startswith("**")


@dataclass(frozen=True)
class Attribute:
    """An annotation attached to a declaration, with its argument list."""

    name: str
    arguments: Tuple[Argument, ...] = field(default_factory=tuple)
    line: int = 0
    column: int = 0


# ---------------------------------------------------------------------------
# Synthesized declarations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AccessorDecl:
    """A getter or setter forwarding ``property_name`` to ``storage.member``.

    A placeholder getter has no storage and fails when evaluated.
    """

    kind: AccessorKind
    property_name: str
    storage_name: Optional[str] = None
    member: Optional[str] = None
    type_annotation: Optional[str] = None

    @property
    def is_placeholder(self) -> bool:
        return self.storage_name is None


@dataclass(frozen=True)
class StorageDecl:
    name: str
    binding: Binding
    wrapper_type: str
    arguments: Tuple[Argument, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PropertyDecl:
    """A computed property made of accessor declarations."""

    name: str
    type_annotation: Optional[str]
    accessors: Tuple[AccessorDecl, ...]


PeerDecl = Union[StorageDecl, PropertyDecl]


@dataclass(frozen=True)
class SynthesizedDeclarations:
    accessors: Tuple[AccessorDecl, ...] = field(default_factory=tuple)
    peers: Tuple[PeerDecl, ...] = field(default_factory=tuple)

    @property
    def is_placeholder(self) -> bool:
        return not self.peers and all(accessor.is_placeholder for accessor in self.accessors)
