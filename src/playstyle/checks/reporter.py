from __future__ import annotations

from typing import IO, Literal

import sys
from collections.abc import Iterable, Iterator, Sequence

import rich.console
from rich.markup import escape

from playstyle.types import Severity

from .base import FATAL_RULE_IDS, TIMEOUT, Diagnostic

type FailOn = Literal["error", "warning", "none"]

#: Problems that make a file unusable. A timeout does not.
_UNUSABLE_FILE_IDS = FATAL_RULE_IDS - {TIMEOUT}


def _sort_key(diag: Diagnostic) -> tuple[str, int, int, str]:
    loc = diag.location
    return loc.file, loc.line, loc.column, diag.rule_id


class Report:
    """Deterministically ordered and deduplicated diagnostics of a run."""

    diagnostics: list[Diagnostic]

    def __init__(self, diagnostics: Iterable[Diagnostic] = ()) -> None:
        unique = dict.fromkeys(diagnostics)
        self.diagnostics = sorted(unique, key=_sort_key)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.diagnostics)

    def __len__(self) -> int:
        return len(self.diagnostics)

    def merged(self, other: Report) -> Report:
        return Report([*self.diagnostics, *other.diagnostics])

    def has_errors(self) -> bool:
        return any(diag.severity is Severity.ERROR for diag in self.diagnostics)

    def has_failures(self, fail_on: FailOn) -> bool:
        """Whether any diagnostic reaches the given severity threshold."""
        if fail_on == "none":
            return False
        threshold = Severity(fail_on).rank
        return any(diag.severity.rank >= threshold for diag in self.diagnostics)

    def has_fatal_errors(self) -> bool:
        """Whether some file could not be evaluated at all."""
        return any(diag.rule_id in _UNUSABLE_FILE_IDS for diag in self.diagnostics)

    def exit_code(self, fail_on: FailOn) -> int:
        if self.has_fatal_errors():
            return 2
        if self.has_failures(fail_on):
            return 1
        return 0


_SEVERITY_STYLES = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "bold yellow",
    Severity.INFO: "bold blue",
}


class TerminalReporter:
    def __init__(self, file: IO[str] | None = None) -> None:
        self.file = file

    def report_results(self, results: Sequence[Diagnostic]) -> None:
        console = rich.console.Console(
            file=self.file or sys.stdout, width=999, highlight=False
        )
        if not results:
            console.print("[green]No warnings found, keep it up!")
        for diag in results:
            style = _SEVERITY_STYLES[diag.severity]
            console.print(
                f"[gray]{escape(str(diag.location))}[/gray]: "
                f"[{style}]\\[{diag.rule_id}][/{style}] {escape(diag.message)}",
                soft_wrap=True,
            )


class JsonReporter:
    """Renders diagnostics as JSON Lines, one record per diagnostic."""

    def __init__(self, file: IO[str] | None = None) -> None:
        self.file = file

    def report_results(self, results: Sequence[Diagnostic]) -> None:
        out = self.file or sys.stdout
        for diag in results:
            out.write(diag.model_dump_json())
            out.write("\n")
