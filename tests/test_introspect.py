import pytest

from macrofy.core import (
    DiagnosticId,
    ExpansionContext,
    WrapperConfig,
    config_declaration,
    expand_wrapper,
    introspect,
)
from macrofy.syntax import AccessorBlock, AccessorKind, Attribute, Binding, Declaration, DeclKind, Member

MACRO = Attribute(name="macrofy", line=3, column=1)


def _declaration(kind: DeclKind, *members: Member, name: str = "Wrapper") -> Declaration:
    return Declaration(kind=kind, name=name, members=tuple(members))


@pytest.mark.parametrize(
    "kind, reference",
    [
        (DeclKind.VALUE_AGGREGATE, False),
        (DeclKind.TAGGED_UNION, False),
        (DeclKind.REFERENCE_CLASS, True),
        (DeclKind.REFERENCE_ACTOR, True),
    ],
)
def test_reference_flag_follows_declaration_kind(kind: DeclKind, reference: bool) -> None:
    result = introspect(_declaration(kind, Member.named("wrapped_value", binding=Binding.IMMUTABLE)))
    assert result.ok
    assert result.config == WrapperConfig(is_reference_type=reference)


@pytest.mark.parametrize("kind", [DeclKind.PROTOCOL, DeclKind.FUNCTION, DeclKind.STATEMENT])
def test_unsupported_kind_fails_before_member_lookup(kind: DeclKind) -> None:
    result = introspect(_declaration(kind), MACRO)
    assert not result.ok
    assert result.config is None
    assert result.diagnostic.id is DiagnosticId.UNSUPPORTED_DECLARATION_KIND
    assert result.diagnostic.line == 3


def test_missing_wrapped_value_is_reported() -> None:
    result = introspect(_declaration(DeclKind.VALUE_AGGREGATE, Member.named("value")), MACRO)
    assert result.diagnostic.id is DiagnosticId.MISSING_WRAPPED_VALUE_MEMBER
    assert result.diagnostic.message == "A property wrapper must have a wrapped_value member."


def test_settable_wrapped_and_projected_values() -> None:
    declaration = _declaration(
        DeclKind.VALUE_AGGREGATE,
        Member.named("wrapped_value", type_annotation="T"),
        Member.named("projected_value", type_annotation="int"),
    )
    config = introspect(declaration).config
    assert config == WrapperConfig(
        wrapped_value_is_settable=True,
        projected_value_is_settable=True,
        projected_value_type="int",
    )


def test_computed_projection_is_read_only() -> None:
    declaration = _declaration(
        DeclKind.REFERENCE_CLASS,
        Member.named("wrapped_value", binding=Binding.IMMUTABLE),
        Member.named("projected_value", accessor_block=AccessorBlock((AccessorKind.GET,)), type_annotation="str"),
    )
    config = introspect(declaration).config
    assert config.projected_value_type == "str"
    assert config.projected_value_is_settable is False
    assert config.wrapped_value_is_settable is False


def test_projection_without_annotation_has_no_type() -> None:
    declaration = _declaration(
        DeclKind.VALUE_AGGREGATE,
        Member.named("wrapped_value"),
        Member.named("projected_value"),
    )
    config = introspect(declaration).config
    assert config.projected_value_type is None


def test_expand_wrapper_emits_config_declaration() -> None:
    context = ExpansionContext(filename="wrappers.py")
    declaration = _declaration(DeclKind.REFERENCE_CLASS, Member.named("wrapped_value"), name="Lazy")
    generated = expand_wrapper(MACRO, declaration, context)
    assert [decl.name for decl in generated] == ["LazyMacro"]
    assert generated[0].facts == (("is_reference_type", True), ("wrapped_value_is_settable", True))
    assert context.diagnostics == ()


def test_expand_wrapper_reports_and_generates_nothing() -> None:
    context = ExpansionContext(filename="wrappers.py")
    generated = expand_wrapper(MACRO, _declaration(DeclKind.PROTOCOL, name="Proto"), context)
    assert generated == []
    assert len(context.diagnostics) == 1
    diagnostic = context.diagnostics[0]
    assert diagnostic.filename == "wrappers.py"
    assert diagnostic.qualified_id == "macrofy.unsupported_declaration"
    assert diagnostic.location() == "wrappers.py:3:1"


def test_config_declaration_keeps_source_name() -> None:
    declaration = _declaration(DeclKind.VALUE_AGGREGATE, name="Clamped")
    generated = config_declaration(declaration, WrapperConfig())
    assert generated.name == "ClampedMacro"
    assert generated.source_name == "Clamped"
    assert generated.facts == ()


def test_introspecting_twice_gives_identical_declarations() -> None:
    declaration = _declaration(
        DeclKind.REFERENCE_CLASS,
        Member.named("wrapped_value"),
        Member.named("projected_value", accessor_block=AccessorBlock((AccessorKind.GET,)), type_annotation="int"),
        name="Lazy",
    )
    first = expand_wrapper(MACRO, declaration, ExpansionContext())
    second = expand_wrapper(MACRO, declaration, ExpansionContext())
    assert first == second
    assert introspect(declaration) == introspect(declaration)
