"""Built-in wrapper configs matching the wrappers in :mod:`macrofy.examples`."""
from __future__ import annotations

from macrofy.core.config import WrapperConfig

BUILTIN_WRAPPERS = (
    ("Example", WrapperConfig()),
    (
        "ExampleSettable",
        WrapperConfig(wrapped_value_is_settable=True, is_reference_type=True),
    ),
    (
        "ExampleWithProjected",
        WrapperConfig(projected_value_type="int"),
    ),
    (
        "ExampleWithSettableProjected",
        WrapperConfig(projected_value_is_settable=True, is_reference_type=True, projected_value_type="int"),
    ),
    ("ExampleWithWrappedValue", WrapperConfig()),
)
