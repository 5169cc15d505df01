"""Lift Python ``ast`` nodes into the syntax model."""
from __future__ import annotations

import ast
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

from macrofy.syntax import (
    AccessorBlock,
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
)

ENUM_BASES = frozenset({"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag"})
PROTOCOL_BASES = frozenset({"Protocol"})
AGGREGATE_BASES = frozenset({"NamedTuple"})
AGGREGATE_DECORATORS = frozenset({"dataclass"})
ACTOR_DECORATORS = frozenset({"actor"})

ANNOTATED = "Annotated"
FINAL = "Final"
CLASS_VAR = "ClassVar"
INITIALIZER = "__init__"

DecoratedDef = Union[ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef]


def dotted_name(expr: ast.expr) -> Optional[str]:
    """Return ``a.b.c`` for name/attribute chains, ``None`` otherwise."""

    if isinstance(expr, ast.Name):
        return expr.id
    if isinstance(expr, ast.Attribute):
        base = dotted_name(expr.value)
        return f"{base}.{expr.attr}" if base else None
    return None


def last_component(name: Optional[str]) -> Optional[str]:
    if name is None:
        return None
    return name.rpartition(".")[2]


def reference_name(expr: ast.expr) -> Optional[str]:
    """Name referenced by a decorator or metadata entry, with or without a call."""

    if isinstance(expr, ast.Call):
        return dotted_name(expr.func)
    return dotted_name(expr)


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


def classify_kind(stmt: ast.stmt) -> DeclKind:
    if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
        return DeclKind.FUNCTION
    if not isinstance(stmt, ast.ClassDef):
        return DeclKind.STATEMENT
    bases = {last_component(_base_name(base)) for base in stmt.bases}
    decorators = {last_component(reference_name(deco)) for deco in stmt.decorator_list}
    if bases & PROTOCOL_BASES:
        return DeclKind.PROTOCOL
    if bases & ENUM_BASES:
        return DeclKind.TAGGED_UNION
    if decorators & ACTOR_DECORATORS:
        return DeclKind.REFERENCE_ACTOR
    if decorators & AGGREGATE_DECORATORS or bases & AGGREGATE_BASES:
        return DeclKind.VALUE_AGGREGATE
    return DeclKind.REFERENCE_CLASS


def lift_declaration(stmt: ast.stmt) -> Declaration:
    kind = classify_kind(stmt)
    name = getattr(stmt, "name", type(stmt).__name__.lower())
    members: Tuple[Member, ...] = tuple()
    if isinstance(stmt, ast.ClassDef):
        members = lift_members(stmt.body, frozen=is_frozen(stmt))
    return Declaration(kind=kind, name=name, members=members, line=getattr(stmt, "lineno", 0))


def is_frozen(stmt: ast.ClassDef) -> bool:
    """``@dataclass(frozen=True)`` classes and ``NamedTuple`` subclasses."""

    if {last_component(_base_name(base)) for base in stmt.bases} & AGGREGATE_BASES:
        return True
    for deco in stmt.decorator_list:
        if not isinstance(deco, ast.Call) or last_component(dotted_name(deco.func)) not in AGGREGATE_DECORATORS:
            continue
        for keyword in deco.keywords:
            if keyword.arg == "frozen" and isinstance(keyword.value, ast.Constant) and keyword.value.value is True:
                return True
    return False


def _base_name(expr: ast.expr) -> Optional[str]:
    if isinstance(expr, ast.Subscript):
        return dotted_name(expr.value)
    return dotted_name(expr)


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------


class _PropertyGroup:
    """Accumulates a ``@property`` with its setter/deleter companions."""

    def __init__(self, name: str, line: int) -> None:
        self.name = name
        self.line = line
        self.accessors: List[AccessorKind] = []
        self.type_annotation: Optional[str] = None

    def add(self, kind: AccessorKind, func: DecoratedDef) -> None:
        if kind not in self.accessors:
            self.accessors.append(kind)
        if kind is AccessorKind.GET and isinstance(func, (ast.FunctionDef, ast.AsyncFunctionDef)) and func.returns:
            self.type_annotation = ast.unparse(func.returns)

    def member(self) -> Member:
        return Member.named(
            self.name,
            accessor_block=AccessorBlock(tuple(self.accessors)),
            type_annotation=self.type_annotation,
            line=self.line,
        )


def lift_members(body: Sequence[ast.stmt], frozen: bool = False) -> Tuple[Member, ...]:
    """Lift a class body into its ordered member list.

    Attributes assigned on ``self`` in ``__init__`` follow the class-level
    members, unless a class-level member already has that name. In a
    ``frozen`` class every annotated field is immutable.
    """

    slots: List[Union[Member, _PropertyGroup]] = []
    groups: Dict[str, _PropertyGroup] = {}
    instance: List[Member] = []
    for stmt in body:
        if isinstance(stmt, ast.AnnAssign):
            slots.append(_lift_ann_assign(stmt, frozen))
        elif isinstance(stmt, ast.Assign):
            slots.append(_lift_assign(stmt))
        elif isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
            if stmt.name == INITIALIZER:
                instance.extend(lift_instance_members(stmt))
            lifted = _lift_function(stmt, groups)
            if lifted is not None:
                slots.append(lifted)
    members = [slot.member() if isinstance(slot, _PropertyGroup) else slot for slot in slots]
    declared = {name for member in members for name in member.identifiers()}
    for member in instance:
        name = member.display_name()
        if name not in declared:
            declared.add(name)
            members.append(member)
    return tuple(members)


def lift_instance_members(func: Union[ast.FunctionDef, ast.AsyncFunctionDef]) -> List[Member]:
    """Stored members created by ``self.<name> = ...`` inside ``func``."""

    positional = func.args.posonlyargs + func.args.args
    if not positional:
        return []
    receiver = positional[0].arg
    members = []
    for stmt in _statements(func.body):
        if isinstance(stmt, ast.AnnAssign):
            if _is_receiver_attribute(stmt.target, receiver):
                is_final, annotation = unwrap_final(stmt.annotation)
                members.append(
                    Member.named(
                        stmt.target.attr,  # type: ignore[attr-defined]
                        binding=Binding.IMMUTABLE if is_final else Binding.MUTABLE,
                        type_annotation=annotation,
                        initializer=ast.unparse(stmt.value) if stmt.value is not None else None,
                        line=stmt.lineno,
                    )
                )
        elif isinstance(stmt, ast.Assign):
            for target in stmt.targets:
                if _is_receiver_attribute(target, receiver):
                    members.append(
                        Member.named(
                            target.attr,  # type: ignore[attr-defined]
                            initializer=ast.unparse(stmt.value),
                            line=stmt.lineno,
                        )
                    )
    return members


def _is_receiver_attribute(target: ast.expr, receiver: str) -> bool:
    return isinstance(target, ast.Attribute) and isinstance(target.value, ast.Name) and target.value.id == receiver


def _statements(body: Sequence[ast.stmt]) -> Iterator[ast.stmt]:
    """Statements of ``body`` and its nested blocks, without entering nested definitions."""

    for stmt in body:
        yield stmt
        if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            continue
        for block in ("body", "orelse", "finalbody"):
            yield from _statements(getattr(stmt, block, ()))
        for handler in getattr(stmt, "handlers", ()):
            yield from _statements(handler.body)


def _lift_function(
    func: Union[ast.FunctionDef, ast.AsyncFunctionDef],
    groups: Dict[str, _PropertyGroup],
) -> Optional[Union[Member, _PropertyGroup]]:
    for deco in func.decorator_list:
        name = reference_name(deco)
        if name is None:
            continue
        head, _, tail = name.rpartition(".")
        if name in {"property", "builtins.property"}:
            group = _PropertyGroup(func.name, func.lineno)
            group.add(AccessorKind.GET, func)
            groups[func.name] = group
            return group
        if tail == "cached_property":
            # A lazily computed stored value; it can be reassigned.
            returns = ast.unparse(func.returns) if func.returns else None
            return Member.named(func.name, type_annotation=returns, line=func.lineno)
        if head in groups and tail in {"getter", "setter", "deleter"}:
            kind = {"getter": AccessorKind.GET, "setter": AccessorKind.SET, "deleter": AccessorKind.DELETE}[tail]
            groups[head].add(kind, func)
            return None
    return None


def _lift_ann_assign(stmt: ast.AnnAssign, frozen: bool = False) -> Member:
    is_final, annotation = unwrap_final(stmt.annotation)
    is_field = frozen and last_component(_base_name(stmt.annotation)) != CLASS_VAR
    return Member(
        patterns=(lift_pattern(stmt.target),),
        binding=Binding.IMMUTABLE if is_final or is_field else Binding.MUTABLE,
        type_annotation=annotation,
        initializer=ast.unparse(stmt.value) if stmt.value is not None else None,
        line=stmt.lineno,
    )


def _lift_assign(stmt: ast.Assign) -> Member:
    accessor_block = None
    value = stmt.value
    if isinstance(value, ast.Call) and last_component(dotted_name(value.func)) == "property":
        accessors = [AccessorKind.GET]
        keywords = {kw.arg for kw in value.keywords}
        if len(value.args) >= 2 or "fset" in keywords:
            accessors.append(AccessorKind.SET)
        accessor_block = AccessorBlock(tuple(accessors))
    return Member(
        patterns=tuple(lift_pattern(target) for target in stmt.targets),
        accessor_block=accessor_block,
        initializer=None if accessor_block else ast.unparse(value),
        line=stmt.lineno,
    )


def lift_pattern(target: ast.expr) -> Pattern:
    if isinstance(target, ast.Name):
        return IdentifierPattern(target.id)
    if isinstance(target, ast.Attribute):
        names: Tuple[str, ...] = (target.attr,)
    else:
        names = tuple(node.id for node in ast.walk(target) if isinstance(node, ast.Name))
    return DestructuringPattern(names=names, text=ast.unparse(target))


def unwrap_final(annotation: ast.expr) -> Tuple[bool, Optional[str]]:
    """Split ``Final``/``Final[T]`` (optionally inside ``ClassVar``) from its type."""

    if last_component(dotted_name(annotation)) == FINAL:
        return True, None
    if isinstance(annotation, ast.Subscript):
        head = last_component(dotted_name(annotation.value))
        if head == FINAL:
            return True, ast.unparse(annotation.slice)
        if head == CLASS_VAR:
            inner_final, inner = unwrap_final(annotation.slice)
            if inner_final:
                return True, inner
    return False, ast.unparse(annotation)


# ---------------------------------------------------------------------------
# Attributes and targets
# ---------------------------------------------------------------------------


def lift_attribute(expr: ast.expr) -> Attribute:
    """Lift a decorator or ``Annotated`` metadata entry into an attribute."""

    if not isinstance(expr, ast.Call):
        return Attribute(name=ast.unparse(expr), line=expr.lineno, column=expr.col_offset)
    positioned: List[Tuple[Tuple[int, int], Argument]] = []
    for arg in expr.args:
        positioned.append(((arg.lineno, arg.col_offset), Argument(value=ast.unparse(arg))))
    for keyword in expr.keywords:
        if keyword.arg is None:
            argument = Argument(value=f"**{ast.unparse(keyword.value)}")
        else:
            argument = Argument(value=ast.unparse(keyword.value), label=keyword.arg)
        positioned.append(((keyword.lineno, keyword.col_offset), argument))
    positioned.sort(key=lambda item: item[0])
    return Attribute(
        name=ast.unparse(expr.func),
        arguments=tuple(argument for _, argument in positioned),
        line=expr.lineno,
        column=expr.col_offset,
    )


def annotated_parts(annotation: Optional[ast.expr]) -> Optional[Tuple[ast.expr, List[ast.expr]]]:
    """Return ``(base, metadata)`` for ``Annotated[base, *metadata]``."""

    if not isinstance(annotation, ast.Subscript):
        return None
    if last_component(dotted_name(annotation.value)) != ANNOTATED:
        return None
    elements = annotation.slice
    if not isinstance(elements, ast.Tuple) or len(elements.elts) < 2:
        return None
    return elements.elts[0], list(elements.elts[1:])


def lift_target(stmt: ast.stmt, attribute_expr: ast.expr) -> Union[Member, Declaration]:
    """Lift the statement an attribute is attached to.

    For an annotated assignment the attribute is removed from the
    ``Annotated`` metadata; any other metadata stays in the type.
    """

    if not isinstance(stmt, ast.AnnAssign):
        return lift_declaration(stmt)
    type_annotation = ast.unparse(stmt.annotation)
    parts = annotated_parts(stmt.annotation)
    if parts is not None:
        base, metadata = parts
        remaining = [entry for entry in metadata if entry is not attribute_expr]
        if remaining:
            head = ast.unparse(stmt.annotation.value)  # type: ignore[attr-defined]
            type_annotation = f"{head}[{', '.join(ast.unparse(e) for e in [base, *remaining])}]"
        else:
            type_annotation = ast.unparse(base)
    return Member(
        patterns=(lift_pattern(stmt.target),),
        type_annotation=type_annotation,
        initializer=ast.unparse(stmt.value) if stmt.value is not None else None,
        line=stmt.lineno,
    )
