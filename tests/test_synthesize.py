from macrofy.core import (
    DiagnosticId,
    ExpansionContext,
    WrapperConfig,
    construction_arguments,
    expand_property,
    placeholder,
    projected_name,
    storage_name,
    synthesize,
)
from macrofy.syntax import (
    AccessorKind,
    Argument,
    Attribute,
    Binding,
    Declaration,
    DeclKind,
    DestructuringPattern,
    IdentifierPattern,
    Member,
    PropertyDecl,
    StorageDecl,
)

EXAMPLE = Attribute(name="Example", line=4, column=13)


def _member(name: str = "inner", **kwargs) -> Member:
    kwargs.setdefault("type_annotation", "Inner")
    return Member.named(name, **kwargs)


def test_generated_names_keep_leading_underscores() -> None:
    assert storage_name("inner") == "_inner"
    assert projected_name("inner") == "projected_inner"
    assert projected_name("_inner") == "_projected_inner"
    assert projected_name("__inner") == "__projected_inner"


def test_default_config_yields_getter_and_immutable_storage() -> None:
    result = synthesize(WrapperConfig(), EXAMPLE, _member())
    assert result.ok
    (getter,) = result.declarations.accessors
    assert getter.kind is AccessorKind.GET
    assert (getter.property_name, getter.storage_name, getter.member) == ("inner", "_inner", "wrapped_value")
    assert result.declarations.peers == (
        StorageDecl(name="_inner", binding=Binding.IMMUTABLE, wrapper_type="Example"),
    )


def test_settable_value_type_gets_setter_and_mutable_storage() -> None:
    result = synthesize(WrapperConfig(wrapped_value_is_settable=True), EXAMPLE, _member())
    kinds = [accessor.kind for accessor in result.declarations.accessors]
    assert kinds == [AccessorKind.GET, AccessorKind.SET]
    assert result.declarations.peers[0].binding is Binding.MUTABLE


def test_reference_type_storage_stays_immutable() -> None:
    config = WrapperConfig(wrapped_value_is_settable=True, is_reference_type=True)
    result = synthesize(config, EXAMPLE, _member())
    assert len(result.declarations.accessors) == 2
    assert result.declarations.peers[0].binding is Binding.IMMUTABLE


def test_projected_value_adds_peer_property() -> None:
    config = WrapperConfig(projected_value_type="int")
    result = synthesize(config, EXAMPLE, _member("_inner"))
    storage, projected = result.declarations.peers
    assert isinstance(storage, StorageDecl)
    assert isinstance(projected, PropertyDecl)
    assert projected.name == "_projected_inner"
    assert projected.type_annotation == "int"
    assert [(a.kind, a.member) for a in projected.accessors] == [(AccessorKind.GET, "projected_value")]


def test_settable_projection_storage_is_mutable_for_value_types() -> None:
    config = WrapperConfig(projected_value_is_settable=True, projected_value_type="int")
    result = synthesize(config, EXAMPLE, _member())
    storage, projected = result.declarations.peers
    assert storage.binding is Binding.MUTABLE
    assert [a.kind for a in projected.accessors] == [AccessorKind.GET, AccessorKind.SET]
    assert [a.kind for a in result.declarations.accessors] == [AccessorKind.GET]


def test_wrapper_type_override() -> None:
    config = WrapperConfig(wrapper_type="wrappers.Example")
    result = synthesize(config, EXAMPLE, _member())
    assert result.declarations.peers[0].wrapper_type == "wrappers.Example"


def test_construction_arguments_put_initializer_first() -> None:
    attribute = Attribute(name="Example", arguments=(Argument("1"), Argument("2", label="key")))
    arguments = construction_arguments(attribute, _member(initializer="0"))
    assert arguments == (Argument("0"), Argument("1"), Argument("2", label="key"))
    assert construction_arguments(attribute, _member()) == attribute.arguments


def test_initializer_is_labelled_when_attribute_has_only_keywords() -> None:
    attribute = Attribute(name="Example", arguments=(Argument("2", label="key"), Argument("**extra")))
    arguments = construction_arguments(attribute, _member(initializer="0"))
    assert arguments == (Argument("0", label="wrapped_value"), Argument("2", label="key"), Argument("**extra"))
    unpacked = Attribute(name="Example", arguments=(Argument("*rest"),))
    assert construction_arguments(unpacked, _member(initializer="0"))[0] == Argument("0")


def test_multiple_bindings_fail_with_placeholder() -> None:
    member = Member(patterns=(IdentifierPattern("a"), IdentifierPattern("b")), type_annotation="int")
    result = synthesize(WrapperConfig(), EXAMPLE, member)
    assert not result.ok
    assert result.diagnostic.id is DiagnosticId.UNEXPECTED_TARGET_SHAPE
    assert result.declarations.is_placeholder
    assert result.declarations.accessors[0].property_name == "a"


def test_destructuring_pattern_fails() -> None:
    member = Member(patterns=(DestructuringPattern(names=("x", "y"), text="(x, y)"),))
    result = synthesize(WrapperConfig(), EXAMPLE, member)
    assert result.diagnostic.id is DiagnosticId.UNEXPECTED_TARGET_SHAPE
    assert result.declarations.accessors[0].property_name == "x"


def test_declaration_target_fails() -> None:
    target = Declaration(kind=DeclKind.FUNCTION, name="compute")
    result = synthesize(WrapperConfig(), EXAMPLE, target)
    assert result.diagnostic.id is DiagnosticId.UNEXPECTED_TARGET_SHAPE
    assert result.declarations == placeholder(target)
    assert result.diagnostic.line == 4


def test_expand_property_reports_to_context() -> None:
    context = ExpansionContext(filename="model.py")
    target = Declaration(kind=DeclKind.REFERENCE_CLASS, name="Nested")
    declarations = expand_property(WrapperConfig(), EXAMPLE, target, context)
    assert declarations.is_placeholder
    assert [d.id for d in context.diagnostics] == [DiagnosticId.UNEXPECTED_TARGET_SHAPE]
    assert context.has_errors


def test_expand_property_success_leaves_context_empty() -> None:
    context = ExpansionContext()
    declarations = expand_property(WrapperConfig(), EXAMPLE, _member(), context)
    assert not declarations.is_placeholder
    assert context.diagnostics == ()
    assert not context.has_errors
