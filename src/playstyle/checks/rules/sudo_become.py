from __future__ import annotations

from typing import final, override

from collections.abc import Sequence

from playstyle.representation import representation as rep
from playstyle.representation.ansible_types import LEGACY_BECOME_KEYWORDS

from ..base import Diagnostic, Rule, RuleContext


@final
class SudoBecomeRule(Rule):
    description = "Use become and its related keywords instead of sudo or su"
    applies_to = frozenset(
        {
            rep.NodeKind.TASK,
            rep.NodeKind.TASK_BLOCK,
            rep.NodeKind.HOST_BLOCK,
            rep.NodeKind.ROLE,
        }
    )

    @override
    def evaluate(self, node: rep.StyleNode, ctx: RuleContext) -> Sequence[Diagnostic]:
        assert isinstance(node, (rep.Task, rep.TaskBlock, rep.HostBlock, rep.RoleRef))

        results: list[Diagnostic] = []
        for entry in node.fields:
            replacement = LEGACY_BECOME_KEYWORDS.get(entry.name)
            if replacement is None:
                continue
            message = f"Use {replacement} instead of {entry.name}"
            if entry.name in ("su", "su_user"):
                message += ", with become_method set to su"
            results.append(self.diagnostic(ctx, entry, message))
        return results
