from __future__ import annotations

from typing import final, override

from collections.abc import Sequence

from playstyle.representation import representation as rep

from ..base import Diagnostic, Rule, RuleContext


def _in_flow_collection(ctx: RuleContext) -> bool:
    return any(
        isinstance(parent, (rep.SequenceNode, rep.MappingNode)) and parent.flow
        for parent in ctx.parents
    )


@final
class MultilineArrayRule(Rule):
    description = "Write lists with one item per line instead of inline brackets"
    applies_to = frozenset({rep.NodeKind.SEQUENCE})

    @override
    def evaluate(self, node: rep.StyleNode, ctx: RuleContext) -> Sequence[Diagnostic]:
        assert isinstance(node, rep.SequenceNode)

        if not node.flow or not node.items or _in_flow_collection(ctx):
            return []
        return [
            self.diagnostic(
                ctx, node, "Use a multi-line list with one item per line, not [...]"
            )
        ]
