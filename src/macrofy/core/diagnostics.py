"""Diagnostics and the expansion context that collects them."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Sequence

from macrofy.syntax import Attribute

DIAGNOSTIC_DOMAIN = "macrofy"


class Severity(Enum):
    ERROR = "error"


class DiagnosticId(Enum):
    """Stable identifiers for every problem the core can report."""

    UNSUPPORTED_DECLARATION_KIND = "unsupported_declaration"
    MISSING_WRAPPED_VALUE_MEMBER = "missing_wrapped_value"
    UNEXPECTED_TARGET_SHAPE = "unexpected_type_declaration"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    DiagnosticId.UNSUPPORTED_DECLARATION_KIND: (
        "The @macrofy macro can only be used on a dataclass, class, actor, or enum."
    ),
    DiagnosticId.MISSING_WRAPPED_VALUE_MEMBER: "A property wrapper must have a wrapped_value member.",
    DiagnosticId.UNEXPECTED_TARGET_SHAPE: "Macro can only be used on a single-name property declaration.",
}


@dataclass(frozen=True)
class Diagnostic:
    """A single error attached to the attribute that triggered an expansion."""

    id: DiagnosticId
    message: str
    severity: Severity = Severity.ERROR
    attribute: Optional[str] = None
    line: int = 0
    column: int = 0
    filename: Optional[str] = None

    @classmethod
    def create(cls, diagnostic_id: DiagnosticId, attribute: Optional[Attribute] = None) -> "Diagnostic":
        if attribute is None:
            return cls(id=diagnostic_id, message=diagnostic_id.message)
        return cls(
            id=diagnostic_id,
            message=diagnostic_id.message,
            attribute=attribute.name,
            line=attribute.line,
            column=attribute.column,
        )

    @property
    def qualified_id(self) -> str:
        return f"{DIAGNOSTIC_DOMAIN}.{self.id.value}"

    def location(self) -> str:
        return f"{self.filename or '<unknown>'}:{self.line}:{self.column}"


@dataclass
class ExpansionContext:
    """Receives diagnostics reported while expanding one source unit."""

    filename: Optional[str] = None
    _diagnostics: List[Diagnostic] = field(default_factory=list)

    def diagnose(self, diagnostic: Diagnostic) -> None:
        if diagnostic.filename is None and self.filename is not None:
            diagnostic = replace(diagnostic, filename=self.filename)
        self._diagnostics.append(diagnostic)

    @property
    def diagnostics(self) -> Sequence[Diagnostic]:
        return tuple(self._diagnostics)

    @property
    def has_errors(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self._diagnostics)
