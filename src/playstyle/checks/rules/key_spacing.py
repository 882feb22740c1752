from __future__ import annotations

from typing import final, override

from collections.abc import Sequence

from playstyle.representation import representation as rep

from ..base import Diagnostic, Rule, RuleContext


@final
class KeySpacingRule(Rule):
    description = "Put no space before the colon of a key, and exactly one after it"
    applies_to = frozenset({rep.NodeKind.ENTRY})

    @override
    def evaluate(self, node: rep.StyleNode, ctx: RuleContext) -> Sequence[Diagnostic]:
        assert isinstance(node, rep.KeyValue)

        results: list[Diagnostic] = []
        if node.spaces_before_colon:
            results.append(
                self.diagnostic(
                    ctx, node, f"Remove the space before the colon of {node.name!r}"
                )
            )
        if node.spaces_after_colon is not None and node.spaces_after_colon != 1:
            results.append(
                self.diagnostic(
                    ctx,
                    node,
                    f"Use exactly one space after the colon of {node.name!r}, "
                    f"found {node.spaces_after_colon}",
                )
            )
        return results
