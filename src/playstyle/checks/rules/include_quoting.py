from __future__ import annotations

from typing import final, override

from collections.abc import Sequence

from playstyle.representation import representation as rep
from playstyle.utils import actions

from ..base import Diagnostic, Rule, RuleContext


def _needs_quotes(text: str) -> bool:
    # Plain scalars cannot start with a flow indicator, e.g. "{{ role }}.yml".
    return text.startswith(("{", "[", "*", "&", "!", "@", "`", "%", "|", ">"))


@final
class IncludeQuotingRule(Rule):
    description = "Do not quote the file names of includes"
    applies_to = frozenset({rep.NodeKind.INCLUDE, rep.NodeKind.TASK})

    @override
    def evaluate(self, node: rep.StyleNode, ctx: RuleContext) -> Sequence[Diagnostic]:
        return [
            self.diagnostic(ctx, target, f"Do not quote included file names: {target.raw}")
            for target in self._targets(node)
            if target.quote_style.is_quoted and not _needs_quotes(target.text)
        ]

    def _targets(self, node: rep.StyleNode) -> list[rep.Scalar]:
        if isinstance(node, rep.IncludeStatement):
            return [node.target] if node.target is not None else []

        assert isinstance(node, rep.Task)
        module = node.module
        if module is None or not actions.is_file_include(module.name):
            return []
        args = module.args
        if isinstance(args, rep.Scalar):
            return [args]
        if isinstance(args, rep.MappingNode):
            entry = args.get("file")
            if entry is not None and isinstance(entry.value, rep.Scalar):
                return [entry.value]
        return []
