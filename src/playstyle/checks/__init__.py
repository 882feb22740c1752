"""Evaluation of style rules on playbook files."""

from __future__ import annotations

import time
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from loguru import logger

from playstyle.config import LintConfig
from playstyle.errors import LintTimeoutError, MalformedPlaybookError, ParseError
from playstyle.representation import representation as rep
from playstyle.representation.builder import build_document
from playstyle.representation.helpers import (
    SourceText,
    is_vault_text,
    probe_vault_references,
)
from playstyle.representation.loaders import load_source, read_source
from playstyle.types import Severity

from .base import (
    IO_ERROR,
    MALFORMED_PLAYBOOK,
    PARSE_ERROR,
    TIMEOUT,
    Diagnostic,
    Location,
)
from .base import Rule as Rule
from .base import RuleContext as RuleContext
from .engine import Engine as Engine
from .registry import RuleRegistry as RuleRegistry
from .reporter import *


def _fatal(rule_id: str, path: str, message: str, line: int = 1, column: int = 1) -> Diagnostic:
    return Diagnostic(
        rule_id=rule_id,
        severity=Severity.ERROR,
        location=Location(file=path, line=line, column=column),
        message=message,
    )


def lint_source(
    text: str,
    path: Path | str,
    config: LintConfig,
    registry: RuleRegistry,
    base_dir: Path | None = None,
    deadline: float | None = None,
) -> list[Diagnostic]:
    """
    Check the text of a playbook.

    Problems that prevent evaluating the playbook are reported as a single
    diagnostic rather than raised.

    :param      base_dir:  Directory that referenced files are resolved against.
                           When None, referenced files are not inspected.
    :param      deadline:  Value of `time.monotonic()` after which evaluation
                           is aborted.
    """
    path_str = str(path)
    engine = Engine(registry, config)

    if is_vault_text(text):
        logger.debug(f"{path_str} is vault-encrypted, skipping content checks")
        source = SourceText(text)
        document = rep.PlaybookDocument(
            path=path_str, encrypted=True, line_count=len(source.lines)
        )
        vault_references: dict[str, bool] = {}
    else:
        try:
            root = load_source(text, path_str)
            document = build_document(root, text, path_str)
        except ParseError as e:
            return [
                _fatal(PARSE_ERROR, path_str, f"Invalid YAML: {e.reason}", e.line, e.column)
            ]
        except MalformedPlaybookError as e:
            return [
                _fatal(
                    MALFORMED_PLAYBOOK,
                    path_str,
                    f"Not a playbook: {e.reason}",
                    e.line,
                    e.column,
                )
            ]
        vault_references = probe_vault_references(document, base_dir)

    try:
        return engine.evaluate(document, vault_references, deadline)
    except LintTimeoutError as e:
        logger.warning(f"{path_str}: {e}")
        return [_fatal(TIMEOUT, path_str, str(e))]


def lint_file(
    path: Path, config: LintConfig, registry: RuleRegistry
) -> list[Diagnostic]:
    """Check a playbook file."""
    logger.debug(f"Checking {path}")
    deadline = time.monotonic() + config.timeout if config.timeout else None
    try:
        text = read_source(path)
    except (OSError, UnicodeDecodeError) as e:
        return [_fatal(IO_ERROR, str(path), f"Cannot read file: {e}")]

    return lint_source(
        text, path, config, registry, base_dir=path.parent, deadline=deadline
    )


def lint_paths(
    paths: Iterable[Path],
    config: LintConfig,
    registry: RuleRegistry,
    jobs: int = 1,
) -> Report:
    """
    Check a collection of playbook files.

    Files are evaluated independently, concurrently when `jobs` exceeds 1. The
    resulting report is ordered deterministically regardless.
    """
    files = list(paths)
    results: Sequence[list[Diagnostic]]
    if jobs > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            results = list(
                pool.map(lambda path: lint_file(path, config, registry), files)
            )
    else:
        results = [lint_file(path, config, registry) for path in files]

    report = Report(diag for diagnostics in results for diag in diagnostics)
    logger.info(f"Checked {len(files)} file(s), found {len(report)} problem(s)")
    return report
