from __future__ import annotations

from typing import final, override

from collections.abc import Sequence

from playstyle.representation import representation as rep

from ..base import Diagnostic, Rule, RuleContext

INDENT = 2


def _is_block_collection(node: rep.StyleNode) -> bool:
    if isinstance(node, (rep.MappingNode, rep.SequenceNode)):
        return not node.flow
    return isinstance(node, rep.RoleRef) and node.style is rep.RoleStyle.MAPPING


def _is_empty_item(node: rep.StyleNode) -> bool:
    return isinstance(node, rep.Scalar) and node.kind is rep.ValueKind.NULL and not node.raw


@final
class IndentationRule(Rule):
    description = "Indent nested mappings and lists by two spaces"
    applies_to = frozenset(
        {rep.NodeKind.ENTRY, rep.NodeKind.SEQUENCE, rep.NodeKind.DOCUMENT}
    )

    @override
    def evaluate(self, node: rep.StyleNode, ctx: RuleContext) -> Sequence[Diagnostic]:
        if isinstance(node, rep.KeyValue):
            return self._check_entry(node, ctx)
        if isinstance(node, rep.SequenceNode):
            if node.flow:
                return []
            return self._check_items(node, node.items, ctx)
        assert isinstance(node, rep.PlaybookDocument)
        return self._check_items(node, node.blocks, ctx)

    def _check_entry(self, node: rep.KeyValue, ctx: RuleContext) -> list[Diagnostic]:
        value = node.value
        if not _is_block_collection(value) or value.position.line <= node.position.line:
            return []
        expected = node.position.column + INDENT
        if value.position.column == expected:
            return []
        return [
            self.diagnostic(
                ctx,
                value,
                f"Indent the contents of {node.name!r} by {INDENT} spaces: expected "
                f"column {expected}, found {value.position.column}",
            )
        ]

    def _check_items(
        self,
        node: rep.StyleNode,
        items: Sequence[rep.StyleNode],
        ctx: RuleContext,
    ) -> list[Diagnostic]:
        expected = node.position.column + INDENT
        return [
            self.diagnostic(
                ctx,
                item,
                f"Indent list items {INDENT} spaces after the dash: expected column "
                f"{expected}, found {item.position.column}",
            )
            for item in items
            if not _is_empty_item(item) and item.position.column != expected
        ]
