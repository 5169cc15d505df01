"""Expand ``@macrofy`` wrapper types and wrapped properties in Python modules."""
from __future__ import annotations

import ast
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from macrofy.core import (
    ConfigDeclaration,
    Diagnostic,
    ExpansionContext,
    WrapperConfig,
    expand_property,
    expand_wrapper,
)
from macrofy.registry import WrapperRegistry, build_registry
from macrofy.syntax import Binding, StorageDecl

from .parser import annotated_parts, last_component, lift_attribute, lift_declaration, lift_target, reference_name
from .printer import CONFIG_CLASS, STORAGE_DECORATOR, config_statements, synthesized_statements

logger = logging.getLogger(__name__)

MACRO_DECORATOR = "macrofy"
STORAGE_IMPORT = f"from functools import {STORAGE_DECORATOR}"
FINAL_IMPORT = "from typing import Final"
CONFIG_IMPORT = f"from macrofy import {CONFIG_CLASS}"

Definition = (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)


@dataclass(frozen=True)
class ExpansionResult:
    """Outcome of expanding one source unit."""

    source: str
    diagnostics: Tuple[Diagnostic, ...] = field(default_factory=tuple)
    configs: Tuple[ConfigDeclaration, ...] = field(default_factory=tuple)
    expanded: int = 0
    changed: bool = False

    @property
    def generated(self) -> int:
        return len(self.configs)

    @property
    def ok(self) -> bool:
        return not self.diagnostics


def expand_source(
    source: str,
    registry: Optional[WrapperRegistry] = None,
    filename: str = "<string>",
) -> ExpansionResult:
    """Expand every wrapper type and wrapped property in ``source``.

    ``registry`` defaults to the built-in wrappers plus anything registered
    by plugins. It is copied before configs discovered in ``source`` are added.
    """

    module = ast.parse(source, filename=filename)
    base = registry if registry is not None else build_registry()
    expander = _ModuleExpander(base, ExpansionContext(filename=filename))
    expander.run(module)
    if not expander.changed:
        return ExpansionResult(source=source, diagnostics=tuple(expander.context.diagnostics))
    output = ast.unparse(ast.fix_missing_locations(module))
    return ExpansionResult(
        source=output + "\n",
        diagnostics=tuple(expander.context.diagnostics),
        configs=tuple(expander.configs),
        expanded=expander.expanded,
        changed=True,
    )


def expand_file(path: str, registry: Optional[WrapperRegistry] = None) -> ExpansionResult:
    source_path = Path(path)
    return expand_source(source_path.read_text(encoding="utf-8"), registry, filename=str(source_path))


class _ModuleExpander:
    def __init__(self, registry: WrapperRegistry, context: ExpansionContext) -> None:
        self.registry = registry.copy()
        self.context = context
        self.configs: List[ConfigDeclaration] = []
        self.expanded = 0
        self.changed = False
        self._needs_storage = False
        self._needs_final = False

    def run(self, module: ast.Module) -> None:
        module.body = self._introspect_body(module.body)
        module.body = self._expand_body(module.body, in_class=False)
        self._add_imports(module)

    # Pass 1: wrapper types -------------------------------------------------

    def _introspect_body(self, body: Sequence[ast.stmt]) -> List[ast.stmt]:
        result: List[ast.stmt] = []
        for stmt in body:
            result.append(stmt)
            if isinstance(stmt, ast.ClassDef):
                stmt.body = self._introspect_body(stmt.body)
            decorator = _macro_decorator(stmt)
            if decorator is None:
                continue
            stmt.decorator_list.remove(decorator)  # type: ignore[attr-defined]
            self.changed = True
            declaration = lift_declaration(stmt)
            for generated in expand_wrapper(lift_attribute(decorator), declaration, self.context):
                self.registry.update_or_register(declaration.name, generated.config)
                self.configs.append(generated)
                result.extend(config_statements(generated))
                logger.debug("Registered %s for wrapper %s", generated.name, declaration.name)
        return result

    # Pass 2: wrapped properties --------------------------------------------

    def _expand_body(self, body: Sequence[ast.stmt], in_class: bool) -> List[ast.stmt]:
        result: List[ast.stmt] = []
        for stmt in body:
            if isinstance(stmt, ast.ClassDef):
                stmt.body = self._expand_body(stmt.body, in_class=True)
            replacement = self._expand_member(stmt) if in_class else None
            if replacement is None:
                result.append(stmt)
            else:
                result.extend(replacement)
                self.changed = True
        return result

    def _expand_member(self, stmt: ast.stmt) -> Optional[List[ast.stmt]]:
        if isinstance(stmt, ast.AnnAssign):
            candidates = _metadata_entries(stmt)
        elif isinstance(stmt, Definition):
            candidates = list(stmt.decorator_list)
        else:
            return None
        matches = self._resolve(candidates)
        if not matches:
            return None
        entry, config = matches[0]
        for extra, _ in matches[1:]:
            logger.warning(
                "Only one wrapper per property is expanded; ignoring %s on line %d",
                ast.unparse(extra),
                stmt.lineno,
            )
        declarations = expand_property(config, lift_attribute(entry), lift_target(stmt, entry), self.context)
        if not declarations.is_placeholder:
            self.expanded += 1
        storage = [peer for peer in declarations.peers if isinstance(peer, StorageDecl)]
        self._needs_storage = self._needs_storage or bool(storage)
        self._needs_final = self._needs_final or any(peer.binding is Binding.IMMUTABLE for peer in storage)
        return synthesized_statements(declarations)

    def _resolve(self, candidates: Sequence[ast.expr]) -> List[Tuple[ast.expr, WrapperConfig]]:
        resolved = []
        for entry in candidates:
            config = self.registry.resolve(reference_name(entry))
            if config is not None:
                resolved.append((entry, config))
        return resolved

    # Imports ---------------------------------------------------------------

    def _add_imports(self, module: ast.Module) -> None:
        imports = []
        if self._needs_storage and not _binds(module, STORAGE_DECORATOR):
            imports.append(STORAGE_IMPORT)
        if self._needs_final and not _binds(module, "Final"):
            imports.append(FINAL_IMPORT)
        if self.configs and not _binds(module, CONFIG_CLASS):
            imports.append(CONFIG_IMPORT)
        if not imports:
            return
        position = _import_position(module.body)
        module.body[position:position] = ast.parse("\n".join(imports)).body


def _macro_decorator(stmt: ast.stmt) -> Optional[ast.expr]:
    for decorator in getattr(stmt, "decorator_list", ()):
        if last_component(reference_name(decorator)) == MACRO_DECORATOR:
            return decorator
    return None


def _metadata_entries(stmt: ast.AnnAssign) -> List[ast.expr]:
    parts = annotated_parts(stmt.annotation)
    if parts is None:
        return []
    return parts[1]


def _binds(module: ast.Module, name: str) -> bool:
    for stmt in module.body:
        if isinstance(stmt, (ast.Import, ast.ImportFrom)):
            if any((alias.asname or alias.name) == name for alias in stmt.names):
                return True
    return False


def _import_position(body: Sequence[ast.stmt]) -> int:
    """Index after the module docstring and ``__future__`` imports."""

    position = 0
    if body and isinstance(body[0], ast.Expr) and isinstance(body[0].value, ast.Constant):
        if isinstance(body[0].value.value, str):
            position = 1
    while position < len(body):
        stmt = body[position]
        if not (isinstance(stmt, ast.ImportFrom) and stmt.module == "__future__"):
            break
        position += 1
    return position
