"""Render synthesized declarations as Python ``ast`` statements."""
from __future__ import annotations

import ast
from typing import Iterable, List, Sequence

from macrofy.core.config import ConfigDeclaration
from macrofy.syntax import (
    AccessorDecl,
    AccessorKind,
    Argument,
    Binding,
    PropertyDecl,
    StorageDecl,
    SynthesizedDeclarations,
)

CONFIG_CLASS = "WrapperConfig"
SETTER_PARAMETER = "new_value"
STORAGE_DECORATOR = "cached_property"


def render_arguments(arguments: Sequence[Argument]) -> str:
    """Join call arguments in their given order."""

    return ", ".join(
        f"{argument.label}={argument.value}" if argument.label is not None else argument.value
        for argument in arguments
    )


def render_storage(storage: StorageDecl) -> str:
    """Render per-instance storage as a lazily built ``cached_property``."""

    call = f"{storage.wrapper_type}({render_arguments(storage.arguments)})"
    returns = storage.wrapper_type
    if storage.binding is Binding.IMMUTABLE:
        returns = f"Final[{returns}]"
    return f"@{STORAGE_DECORATOR}\ndef {storage.name}(self) -> {returns}:\n    return {call}\n"


def render_accessor(accessor: AccessorDecl) -> str:
    name = accessor.property_name
    if accessor.is_placeholder:
        message = f"{name} could not be expanded"
        return f"@property\ndef {name}(self):\n    raise NotImplementedError({message!r})\n"
    target = f"self.{accessor.storage_name}.{accessor.member}"
    if accessor.kind is AccessorKind.GET:
        returns = f" -> {accessor.type_annotation}" if accessor.type_annotation else ""
        return f"@property\ndef {name}(self){returns}:\n    return {target}\n"
    if accessor.kind is AccessorKind.SET:
        annotation = f": {accessor.type_annotation}" if accessor.type_annotation else ""
        return (
            f"@{name}.setter\n"
            f"def {name}(self, {SETTER_PARAMETER}{annotation}) -> None:\n"
            f"    {target} = {SETTER_PARAMETER}\n"
        )
    raise ValueError(f"Unsupported accessor kind '{accessor.kind.value}'")


def render_config(declaration: ConfigDeclaration) -> str:
    facts = ", ".join(f"{name}={value!r}" for name, value in declaration.facts)
    return f"{declaration.name} = {CONFIG_CLASS}({facts})"


def accessor_statements(accessors: Iterable[AccessorDecl]) -> List[ast.stmt]:
    return _parse("\n".join(render_accessor(accessor) for accessor in accessors))


def peer_statements(declarations: SynthesizedDeclarations) -> List[ast.stmt]:
    chunks = []
    for peer in declarations.peers:
        if isinstance(peer, StorageDecl):
            chunks.append(render_storage(peer))
        elif isinstance(peer, PropertyDecl):
            chunks.extend(render_accessor(accessor) for accessor in peer.accessors)
    return _parse("\n".join(chunks))


def synthesized_statements(declarations: SynthesizedDeclarations) -> List[ast.stmt]:
    """Accessors first, then peers, in the order the host splices them."""

    return accessor_statements(declarations.accessors) + peer_statements(declarations)


def config_statements(declaration: ConfigDeclaration) -> List[ast.stmt]:
    return _parse(render_config(declaration))


def to_source(statements: Sequence[ast.stmt]) -> str:
    module = ast.Module(body=list(statements), type_ignores=[])
    return ast.unparse(ast.fix_missing_locations(module))


def _parse(text: str) -> List[ast.stmt]:
    if not text.strip():
        return []
    return list(ast.parse(text).body)
