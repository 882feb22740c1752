"""Evaluation of rules on the style model."""
from __future__ import annotations

from typing import TYPE_CHECKING

import time
from collections.abc import Mapping

import attrs
from loguru import logger

from playstyle.errors import LintTimeoutError
from playstyle.representation import representation as rep

from .base import Diagnostic, Rule, RuleContext
from .registry import RuleRegistry

if TYPE_CHECKING:
    from playstyle.config import LintConfig


class Engine:
    """
    Walks a document depth-first and dispatches every applicable rule on each
    node.

    Rules never observe each other's results, except through supersession:
    when a rule reports on a node, the diagnostics of the rules it supersedes
    are dropped for that node.
    """

    registry: RuleRegistry
    config: LintConfig

    def __init__(self, registry: RuleRegistry, config: LintConfig) -> None:
        self.registry = registry
        self.config = config
        self._dispatch: dict[rep.NodeKind, list[Rule]] = {
            kind: [
                rule
                for rule in registry.rules_for(kind)
                if config.is_enabled(rule.id)
            ]
            for kind in rep.NodeKind
        }

    def evaluate(
        self,
        document: rep.PlaybookDocument,
        vault_references: Mapping[str, bool] | None = None,
        deadline: float | None = None,
    ) -> list[Diagnostic]:
        """
        Evaluate all enabled rules on a document.

        :param      deadline:  Value of `time.monotonic()` after which evaluation
                               is aborted.

        :raises     LintTimeoutError:  When the deadline passes during evaluation.
        """
        ctx = RuleContext(
            config=self.config,
            path=document.path,
            document=document,
            vault_references=vault_references or {},
        )
        diagnostics: list[Diagnostic] = []
        self._check_deadline(deadline)
        diagnostics.extend(self.evaluate_node(document, ctx))

        child_ctx = attrs.evolve(ctx, parents=(document,))
        blocks = document.blocks
        for idx, block in enumerate(blocks):
            block_ctx = attrs.evolve(
                child_ctx,
                previous=blocks[idx - 1] if idx > 0 else None,
                next=blocks[idx + 1] if idx + 1 < len(blocks) else None,
            )
            diagnostics.extend(self._walk(block, block_ctx, deadline))

        logger.debug(f"{document.path}: {len(diagnostics)} diagnostics")
        return diagnostics

    def _walk(
        self, node: rep.StyleNode, ctx: RuleContext, deadline: float | None
    ) -> list[Diagnostic]:
        self._check_deadline(deadline)
        diagnostics = self.evaluate_node(node, ctx)

        children = node.children()
        if children:
            child_ctx = attrs.evolve(
                ctx, parents=(*ctx.parents, node), previous=None, next=None
            )
            for child in children:
                diagnostics.extend(self._walk(child, child_ctx, deadline))
        return diagnostics

    def evaluate_node(self, node: rep.StyleNode, ctx: RuleContext) -> list[Diagnostic]:
        """Evaluate the applicable rules on a single node."""
        results: dict[str, list[Diagnostic]] = {}
        for rule in self._dispatch[node.node_kind]:
            if not rule.accepts(node):
                continue
            found = list(rule.evaluate(node, ctx))
            if found:
                results[rule.id] = found

        superseded = {
            rule_id
            for reporting in results
            for rule_id in self._supersedes(reporting)
        }
        return [
            self._apply_severity(diag)
            for rule_id, found in results.items()
            if rule_id not in superseded
            for diag in found
        ]

    def _supersedes(self, rule_id: str) -> frozenset[str]:
        rule = self.registry.get(rule_id)
        return rule.supersedes if rule is not None else frozenset()

    def _apply_severity(self, diag: Diagnostic) -> Diagnostic:
        severity = self.config.severity_for(diag.rule_id, diag.severity)
        if severity is diag.severity:
            return diag
        return diag.model_copy(update={"severity": severity})

    def _check_deadline(self, deadline: float | None) -> None:
        if deadline is not None and time.monotonic() > deadline:
            raise LintTimeoutError(self.config.timeout or 0.0)
