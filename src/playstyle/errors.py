"""Error taxonomy."""

from __future__ import annotations

from pathlib import Path


class PlaystyleError(Exception):
    """Base class for all errors raised by playstyle."""

    pass


class ParseError(PlaystyleError):
    """Raised when a file is not valid YAML."""

    #: Path to the file that failed to parse.
    file_path: Path | str
    #: Reason parsing failed.
    reason: str
    #: 1-based line of the problem, if known.
    line: int
    #: 1-based column of the problem, if known.
    column: int

    def __init__(
        self, file_path: Path | str, reason: str, line: int = 1, column: int = 1
    ) -> None:
        super().__init__(f"Failed to parse {file_path}:{line}:{column}: {reason}")
        self.file_path = file_path
        self.reason = reason
        self.line = line
        self.column = column


class MalformedPlaybookError(PlaystyleError):
    """Raised when valid YAML does not have the shape of a playbook."""

    #: Reason the document is not a playbook.
    reason: str
    #: 1-based line of the offending entry.
    line: int
    #: 1-based column of the offending entry.
    column: int

    def __init__(self, reason: str, line: int = 1, column: int = 1) -> None:
        super().__init__(f"Not a playbook: {reason}")
        self.reason = reason
        self.line = line
        self.column = column


class DuplicateRuleIdError(PlaystyleError):
    """Raised when two rules are registered under the same identifier."""

    def __init__(self, rule_id: str) -> None:
        super().__init__(f"A rule with id {rule_id!r} is already registered")
        self.rule_id = rule_id


class ConfigError(PlaystyleError):
    """Raised when the configuration is invalid."""

    pass


class LintTimeoutError(PlaystyleError, TimeoutError):
    """Raised when evaluating a single file exceeds its time budget."""

    def __init__(self, budget: float) -> None:
        super().__init__(f"Evaluation exceeded the time budget of {budget:.2f}s")
        self.budget = budget
