from __future__ import annotations

import ast
import textwrap

import pytest

from macrofy.python.parser import (
    annotated_parts,
    classify_kind,
    is_frozen,
    lift_attribute,
    lift_declaration,
    lift_instance_members,
    lift_members,
    lift_target,
    unwrap_final,
)
from macrofy.syntax import AccessorKind, Argument, Binding, Declaration, DeclKind, DestructuringPattern, Member


def _stmt(source: str) -> ast.stmt:
    return ast.parse(textwrap.dedent(source)).body[0]


def _expr(source: str) -> ast.expr:
    return ast.parse(source, mode="eval").body


@pytest.mark.parametrize(
    "source, kind",
    [
        ("@dataclass\nclass A: pass", DeclKind.VALUE_AGGREGATE),
        ("@dataclasses.dataclass(frozen=True)\nclass A: pass", DeclKind.VALUE_AGGREGATE),
        ("class A(NamedTuple): pass", DeclKind.VALUE_AGGREGATE),
        ("class A: pass", DeclKind.REFERENCE_CLASS),
        ("class A(Generic[T]): pass", DeclKind.REFERENCE_CLASS),
        ("@actor\nclass A: pass", DeclKind.REFERENCE_ACTOR),
        ("class A(enum.IntEnum): pass", DeclKind.TAGGED_UNION),
        ("class A(Protocol[T]): pass", DeclKind.PROTOCOL),
        ("def a(): pass", DeclKind.FUNCTION),
        ("async def a(): pass", DeclKind.FUNCTION),
        ("x = 1", DeclKind.STATEMENT),
    ],
)
def test_classify_kind(source: str, kind: DeclKind) -> None:
    assert classify_kind(_stmt(source)) is kind


def test_lift_members_covers_stored_and_computed_members() -> None:
    source = """
    class Wrapper:
        wrapped_value: Final[int]
        limit: ClassVar[Final] = 3
        count: int = 0
        a = b = 1

        @property
        def projected_value(self) -> str:
            return ""

        @projected_value.setter
        def projected_value(self, value: str) -> None:
            pass

        @cached_property
        def lazy(self) -> float:
            return 1.0

        def helper(self):
            pass

        legacy = property(_get, _set)
    """
    members = lift_members(_stmt(source).body)
    names = [member.display_name() for member in members]
    assert names == ["wrapped_value", "limit", "count", "a", "projected_value", "lazy", "legacy"]
    wrapped, limit, count, multi, projected, lazy, legacy = members
    assert wrapped.binding is Binding.IMMUTABLE and wrapped.type_annotation == "int"
    assert limit.binding is Binding.IMMUTABLE and limit.type_annotation is None
    assert count.binding is Binding.MUTABLE and count.initializer == "0"
    assert multi.identifiers() == ("a", "b")
    assert projected.accessor_block.accessors == (AccessorKind.GET, AccessorKind.SET)
    assert projected.type_annotation == "str"
    assert lazy.accessor_block is None and lazy.type_annotation == "float"
    assert legacy.accessor_block.has_setter


def test_unwrap_final() -> None:
    assert unwrap_final(_expr("Final")) == (True, None)
    assert unwrap_final(_expr("typing.Final[int]")) == (True, "int")
    assert unwrap_final(_expr("ClassVar[Final[str]]")) == (True, "str")
    assert unwrap_final(_expr("ClassVar[int]")) == (False, "ClassVar[int]")
    assert unwrap_final(_expr("list[int]")) == (False, "list[int]")


def test_lift_attribute_keeps_source_order() -> None:
    attribute = lift_attribute(_expr("Example(1, key=2, *rest, **extra)"))
    assert attribute.name == "Example"
    assert attribute.arguments == (
        Argument("1"),
        Argument("2", label="key"),
        Argument("*rest"),
        Argument("**extra"),
    )


def test_lift_attribute_without_call() -> None:
    attribute = lift_attribute(_expr("wrappers.Example"))
    assert attribute.name == "wrappers.Example"
    assert attribute.arguments == ()


def test_annotated_parts() -> None:
    base, metadata = annotated_parts(_expr("Annotated[int, 'doc', Example()]"))
    assert ast.unparse(base) == "int"
    assert [ast.unparse(entry) for entry in metadata] == ["'doc'", "Example()"]
    assert annotated_parts(_expr("Annotated[int]")) is None
    assert annotated_parts(_expr("list[int]")) is None
    assert annotated_parts(None) is None


def test_lift_target_strips_attribute_from_metadata() -> None:
    stmt = _stmt("value: Annotated[int, 'doc', Example(1)] = 3")
    _, metadata = annotated_parts(stmt.annotation)
    member = lift_target(stmt, metadata[1])
    assert member == Member.named("value", type_annotation="Annotated[int, 'doc']", initializer="3", line=1)


def test_lift_target_with_single_metadata_entry() -> None:
    stmt = _stmt("value: typing.Annotated[list[str], Example()]")
    _, metadata = annotated_parts(stmt.annotation)
    member = lift_target(stmt, metadata[0])
    assert member.type_annotation == "list[str]"
    assert member.initializer is None


def test_lift_target_attribute_target_is_destructuring() -> None:
    stmt = _stmt("other.value: Annotated[int, Example()] = 1")
    _, metadata = annotated_parts(stmt.annotation)
    member = lift_target(stmt, metadata[0])
    assert member.patterns == (DestructuringPattern(names=("value",), text="other.value"),)


def test_lift_target_for_definition() -> None:
    stmt = _stmt("@Example\ndef compute(self):\n    return 1\n")
    target = lift_target(stmt, stmt.decorator_list[0])
    assert target == Declaration(kind=DeclKind.FUNCTION, name="compute", line=2)


def test_lift_declaration_lifts_class_members() -> None:
    declaration = lift_declaration(_stmt("class Box:\n    wrapped_value: int\n"))
    assert declaration.kind is DeclKind.REFERENCE_CLASS
    assert declaration.name == "Box"
    assert declaration.members[0].identifiers() == ("wrapped_value",)


def test_lift_members_includes_attributes_assigned_in_init() -> None:
    source = """
    class Wrapper:
        limit: int = 3

        def __init__(self, wrapped_value, limit=None):
            self.wrapped_value = wrapped_value
            if limit is not None:
                self.limit = limit
            self.token: Final[str] = "t"

        def reset(self):
            self.cleared = True
    """
    members = lift_members(_stmt(source).body)
    assert [member.display_name() for member in members] == ["limit", "wrapped_value", "token"]
    _, wrapped, token = members
    assert wrapped == Member.named("wrapped_value", initializer="wrapped_value", line=6)
    assert token.binding is Binding.IMMUTABLE and token.type_annotation == "str"


def test_lift_instance_members_uses_receiver_name() -> None:
    func = _stmt(
        """
        def __init__(this, value):
            this.wrapped_value: int = value
            other.ignored = 1

            def nested():
                this.hidden = 2
        """
    )
    members = lift_instance_members(func)
    assert [member.display_name() for member in members] == ["wrapped_value"]
    assert members[0].binding is Binding.MUTABLE and members[0].type_annotation == "int"
    assert lift_instance_members(_stmt("def __init__(): pass")) == []


@pytest.mark.parametrize(
    "source, frozen",
    [
        ("@dataclass(frozen=True)\nclass A: pass", True),
        ("@dataclasses.dataclass(frozen=True, order=True)\nclass A: pass", True),
        ("class A(typing.NamedTuple): pass", True),
        ("@dataclass(frozen=False)\nclass A: pass", False),
        ("@dataclass\nclass A: pass", False),
        ("class A: pass", False),
    ],
)
def test_is_frozen(source: str, frozen: bool) -> None:
    assert is_frozen(_stmt(source)) is frozen


def test_frozen_class_fields_are_immutable() -> None:
    declaration = lift_declaration(
        _stmt("@dataclass(frozen=True)\nclass Box:\n    wrapped_value: int\n    shared: ClassVar[int] = 0\n")
    )
    wrapped, shared = declaration.members
    assert wrapped.binding is Binding.IMMUTABLE
    assert shared.binding is Binding.MUTABLE
