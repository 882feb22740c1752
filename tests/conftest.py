from __future__ import annotations

from typing import Any, Callable

import sys
from pathlib import Path
from textwrap import dedent

import pytest
from loguru import logger

from playstyle.checks import Diagnostic, RuleRegistry, lint_source
from playstyle.config import LintConfig
from playstyle.representation import build_document, load_source
from playstyle.representation import representation as rep

logger.remove()
logger.add(sys.stderr, format="{level} {message}", level="DEBUG")

DATA_DIR = Path(__file__).parent / "data"

type Linter = Callable[..., list[Diagnostic]]
type Builder = Callable[[str], rep.PlaybookDocument]


def playbook(content: str) -> str:
    """Dedent a playbook written inline in a test."""
    return dedent(content).lstrip("\n")


@pytest.fixture(scope="session")
def registry() -> RuleRegistry:
    return RuleRegistry.default()


@pytest.fixture()
def lint(registry: RuleRegistry) -> Linter:
    """Lint inline playbook content, optionally keeping a single rule's results."""

    def _lint(
        content: str,
        only: str | None = None,
        path: str = "playbook.yml",
        base_dir: Path | None = None,
        **config: Any,
    ) -> list[Diagnostic]:
        results = lint_source(
            playbook(content), path, LintConfig(**config), registry, base_dir=base_dir
        )
        if only is not None:
            results = [diag for diag in results if diag.rule_id == only]
        return results

    return _lint


@pytest.fixture()
def build() -> Builder:
    def _build(content: str) -> rep.PlaybookDocument:
        text = playbook(content)
        return build_document(load_source(text, "playbook.yml"), text, "playbook.yml")

    return _build
