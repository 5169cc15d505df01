"""Terminal reporter rendering diagnostics and summaries."""
from __future__ import annotations

from typing import Sequence

import click
from colorama import Fore, Style, init as colorama_init

from macrofy.core import Diagnostic
from macrofy.python.expander import ExpansionResult

from .base import Reporter, SourceResult


class TerminalReporter(Reporter):
    """Human-readable reporter that streams to stderr.

    Stdout is left for the expanded source.
    """

    def __init__(self, *, use_color: bool = True) -> None:
        self._use_color = use_color
        if use_color:
            colorama_init()

    def on_start(self, sources: Sequence[str]) -> None:
        click.echo(self._styled(f"Expanding {len(sources)} source(s)", Fore.CYAN), err=True)

    def on_source_result(self, path: str, result: ExpansionResult, index: int, total: int) -> None:
        for diagnostic in result.diagnostics:
            click.echo(self.format_diagnostic(diagnostic), err=True)
        label, color = _format_status(result)
        click.echo(
            f"[{index}/{total}] {path} -> {self._styled(label, color)} "
            f"(expanded={result.expanded} generated={result.generated})",
            err=True,
        )

    def on_complete(self, results: Sequence[SourceResult]) -> None:
        diagnostics = sum(len(result.diagnostics) for _, result in results)
        changed = sum(1 for _, result in results if result.changed)
        color = Fore.GREEN if diagnostics == 0 else Fore.RED
        click.echo(
            f"{self._styled('Summary', color)}: total={len(results)} changed={changed} "
            f"diagnostics={diagnostics}",
            err=True,
        )

    def format_diagnostic(self, diagnostic: Diagnostic) -> str:
        severity = self._styled(diagnostic.severity.value, Fore.RED)
        return f"{diagnostic.location()}: {severity}: {diagnostic.message} [{diagnostic.qualified_id}]"

    def _styled(self, text: str, color: str) -> str:
        if not self._use_color or not color:
            return text
        return f"{color}{text}{Style.RESET_ALL}"


def _format_status(result: ExpansionResult) -> tuple[str, str]:
    if not result.ok:
        return "ERROR", Fore.RED
    if result.changed:
        return "EXPANDED", Fore.GREEN
    return "UNCHANGED", Fore.YELLOW
