"""Python source front end: parsing, printing and module expansion."""
from .expander import ExpansionResult, expand_file, expand_source
from .parser import lift_attribute, lift_declaration, lift_members, lift_target
from .printer import config_statements, synthesized_statements, to_source

__all__ = [
    "ExpansionResult",
    "config_statements",
    "expand_file",
    "expand_source",
    "lift_attribute",
    "lift_declaration",
    "lift_members",
    "lift_target",
    "synthesized_statements",
    "to_source",
]
