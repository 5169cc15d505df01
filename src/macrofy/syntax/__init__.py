"""Syntax model consumed and produced by the expansion core."""
from .models import (
    REFERENCE_KINDS,
    SUPPORTED_KINDS,
    AccessorBlock,
    AccessorDecl,
    AccessorKind,
    Argument,
    Attribute,
    Binding,
    Declaration,
    DeclKind,
    DestructuringPattern,
    IdentifierPattern,
    Member,
    Pattern,
    PeerDecl,
    PropertyDecl,
    StorageDecl,
    SynthesizedDeclarations,
)

__all__ = [
    "REFERENCE_KINDS",
    "SUPPORTED_KINDS",
    "AccessorBlock",
    "AccessorDecl",
    "AccessorKind",
    "Argument",
    "Attribute",
    "Binding",
    "Declaration",
    "DeclKind",
    "DestructuringPattern",
    "IdentifierPattern",
    "Member",
    "Pattern",
    "PeerDecl",
    "PropertyDecl",
    "StorageDecl",
    "SynthesizedDeclarations",
]
