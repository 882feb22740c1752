from __future__ import annotations

from typing import final, override

from collections.abc import Sequence

from playstyle.representation import representation as rep

from ..base import Diagnostic, Rule, RuleContext


@final
class DocumentStartRule(Rule):
    description = (
        "Start playbooks with ---, separated from any header comments by a blank line"
    )
    applies_to = frozenset({rep.NodeKind.DOCUMENT})

    @override
    def evaluate(self, node: rep.StyleNode, ctx: RuleContext) -> Sequence[Diagnostic]:
        assert isinstance(node, rep.PlaybookDocument)

        if node.encrypted:
            return []

        position = rep.Position(node.start_line, 1)
        if not node.explicit_start:
            return [
                self.diagnostic(
                    ctx, node, "Mark the start of the document with ---", position
                )
            ]
        if node.header_comment and not node.blank_before_start:
            return [
                self.diagnostic(
                    ctx,
                    node,
                    "Separate the header comments from --- with a blank line",
                    position,
                )
            ]
        return []
