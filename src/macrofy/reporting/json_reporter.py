"""JSON reporter emitting structured expansion results."""
from __future__ import annotations

import datetime as dt
import json
import pathlib
from typing import Any, Dict, List, Optional, Sequence

import click
from jsonschema import validate

from macrofy.core import ConfigDeclaration, Diagnostic
from macrofy.python.expander import ExpansionResult

from .base import Reporter, SourceResult
from .schema import JSON_SCHEMA_V1, SCHEMA_VERSION


class JsonReporter(Reporter):
    """Writes results as JSON validated against the report schema.

    Without a path the report goes to stderr.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self._path = pathlib.Path(path) if path else None
        self._records: List[Dict[str, Any]] = []

    def on_start(self, sources: Sequence[str]) -> None:
        self._records.clear()

    def on_source_result(self, path: str, result: ExpansionResult, index: int, total: int) -> None:
        self._records.append(_source_to_dict(path, result))

    def on_complete(self, results: Sequence[SourceResult]) -> None:
        payload = {
            "schema_version": SCHEMA_VERSION,
            "generated_at": dt.datetime.now(dt.timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
            "summary": _build_summary(results),
            "sources": self._records,
        }
        validate(instance=payload, schema=JSON_SCHEMA_V1)
        text = json.dumps(payload, indent=2)
        if self._path is None:
            click.echo(text, err=True)
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(text, encoding="utf-8")
        except OSError as exc:  # pragma: no cover - filesystem protection
            raise RuntimeError(f"Failed to write JSON report to {self._path}: {exc}") from exc
        click.echo(f"JSON report written to {self._path}", err=True)


def _build_summary(results: Sequence[SourceResult]) -> Dict[str, Any]:
    return {
        "total": len(results),
        "changed": sum(1 for _, result in results if result.changed),
        "expanded": sum(result.expanded for _, result in results),
        "generated": sum(result.generated for _, result in results),
        "diagnostics": sum(len(result.diagnostics) for _, result in results),
    }


def _source_to_dict(path: str, result: ExpansionResult) -> Dict[str, Any]:
    return {
        "path": path,
        "ok": result.ok,
        "changed": result.changed,
        "expanded": result.expanded,
        "configs": [_config_to_dict(config) for config in result.configs],
        "diagnostics": [_diagnostic_to_dict(diagnostic) for diagnostic in result.diagnostics],
    }


def _config_to_dict(config: ConfigDeclaration) -> Dict[str, Any]:
    return {"name": config.name, "wrapper": config.source_name, "facts": dict(config.facts)}


def _diagnostic_to_dict(diagnostic: Diagnostic) -> Dict[str, Any]:
    return {
        "id": diagnostic.qualified_id,
        "message": diagnostic.message,
        "severity": diagnostic.severity.value,
        "attribute": diagnostic.attribute,
        "line": diagnostic.line,
        "column": diagnostic.column,
    }
