"""Reporter interface definitions."""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from macrofy.python.expander import ExpansionResult

SourceResult = Tuple[str, ExpansionResult]


class Reporter:
    """Interface for output renderers."""

    def on_start(self, sources: Sequence[str]) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def on_source_result(self, path: str, result: ExpansionResult, index: int, total: int) -> None:  # pragma: no cover
        raise NotImplementedError

    def on_complete(self, results: Sequence[SourceResult]) -> None:  # pragma: no cover
        raise NotImplementedError


class ReportManager:
    """Dispatches lifecycle callbacks to multiple reporters."""

    def __init__(self, reporters: Sequence[Reporter]) -> None:
        self._reporters = list(reporters)
        self._results: List[SourceResult] = []

    def start(self, sources: Sequence[str]) -> None:
        self._results.clear()
        for reporter in self._reporters:
            reporter.on_start(sources)

    def handle_result(self, path: str, result: ExpansionResult, index: int, total: int) -> None:
        self._results.append((path, result))
        for reporter in self._reporters:
            reporter.on_source_result(path, result, index, total)

    def complete(self) -> None:
        for reporter in self._reporters:
            reporter.on_complete(list(self._results))

    def reporters(self) -> List[Reporter]:
        return list(self._reporters)


def build_reporters(report_format: str, report_path: Optional[str], *, use_color: bool = True) -> ReportManager:
    from .json_reporter import JsonReporter
    from .terminal import TerminalReporter

    if report_format == "json":
        return ReportManager([JsonReporter(path=report_path)])
    if report_format == "terminal":
        return ReportManager([TerminalReporter(use_color=use_color)])
    raise ValueError(f"Unsupported report format '{report_format}'")
