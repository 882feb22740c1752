from __future__ import annotations

from typing import final, override

from collections.abc import Sequence

from playstyle.representation import representation as rep

from ..base import Diagnostic, Rule, RuleContext


@final
class EndOfFileRule(Rule):
    description = "End files with exactly one newline"
    applies_to = frozenset({rep.NodeKind.DOCUMENT})

    @override
    def evaluate(self, node: rep.StyleNode, ctx: RuleContext) -> Sequence[Diagnostic]:
        assert isinstance(node, rep.PlaybookDocument)

        if node.encrypted:
            return []

        if not node.ends_with_newline:
            position = rep.Position(max(node.line_count, 1), 1)
            return [
                self.diagnostic(ctx, node, "Add a newline at the end of the file", position)
            ]
        if node.trailing_blank_lines:
            # Lines are counted up to the remainder after the final line break.
            position = rep.Position(node.line_count - node.trailing_blank_lines, 1)
            return [
                self.diagnostic(
                    ctx,
                    node,
                    f"Remove the {node.trailing_blank_lines} blank line(s) at the end "
                    "of the file",
                    position,
                )
            ]
        return []
