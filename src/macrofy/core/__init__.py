"""Expansion core: classification, introspection and synthesis."""
from .classifier import PROJECTED_VALUE, WRAPPED_VALUE, find_member, is_settable
from .config import DEFAULT_CONFIG, ConfigDeclaration, WrapperConfig, config_name_for
from .diagnostics import Diagnostic, DiagnosticId, ExpansionContext, Severity
from .introspect import IntrospectionResult, config_declaration, expand_wrapper, introspect
from .synthesize import (
    SynthesisResult,
    construction_arguments,
    expand_property,
    placeholder,
    projected_name,
    storage_name,
    synthesize,
)

__all__ = [
    "PROJECTED_VALUE",
    "WRAPPED_VALUE",
    "DEFAULT_CONFIG",
    "ConfigDeclaration",
    "Diagnostic",
    "DiagnosticId",
    "ExpansionContext",
    "IntrospectionResult",
    "Severity",
    "SynthesisResult",
    "WrapperConfig",
    "config_declaration",
    "config_name_for",
    "construction_arguments",
    "expand_property",
    "expand_wrapper",
    "find_member",
    "introspect",
    "is_settable",
    "placeholder",
    "projected_name",
    "storage_name",
    "synthesize",
]
