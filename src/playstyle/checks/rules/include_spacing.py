from __future__ import annotations

from typing import final, override

from collections.abc import Sequence

from playstyle.representation import representation as rep

from ..base import Diagnostic, Rule, RuleContext


def _is_single_line_include(block: rep.Block | None) -> bool:
    return isinstance(block, rep.IncludeStatement) and not block.multiline


@final
class IncludeSpacingRule(Rule):
    description = (
        "Surround includes with parameters by blank lines, and do not separate "
        "adjacent single-line includes"
    )
    applies_to = frozenset({rep.NodeKind.INCLUDE})

    @override
    def evaluate(self, node: rep.StyleNode, ctx: RuleContext) -> Sequence[Diagnostic]:
        assert isinstance(node, rep.IncludeStatement)

        if node.multiline:
            missing_before = ctx.previous is not None and not node.blank_lines_before
            missing_after = ctx.next is not None and not ctx.next.blank_lines_before
            if missing_before or missing_after:
                return [
                    self.diagnostic(
                        ctx,
                        node,
                        "Surround includes spanning multiple lines with blank lines",
                    )
                ]
            return []

        blank_before = (
            _is_single_line_include(ctx.previous) and node.blank_lines_before > 0
        )
        blank_after = (
            ctx.next is not None
            and _is_single_line_include(ctx.next)
            and ctx.next.blank_lines_before > 0
        )
        if blank_before or blank_after:
            return [
                self.diagnostic(
                    ctx,
                    node,
                    "Do not separate adjacent single-line includes with blank lines",
                )
            ]
        return []
