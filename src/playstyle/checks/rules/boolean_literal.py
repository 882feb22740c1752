from __future__ import annotations

from typing import final, override

from collections.abc import Sequence

from playstyle.representation import representation as rep
from playstyle.representation.ansible_types import TRUE_TOKENS

from ..base import Diagnostic, Rule, RuleContext


@final
class BooleanLiteralRule(Rule):
    description = "Write booleans as unquoted true or false"
    applies_to = frozenset({rep.NodeKind.SCALAR})
    contexts = frozenset(
        {
            rep.ScalarContext.MODULE_PARAMETER,
            rep.ScalarContext.VARIABLE_VALUE,
            rep.ScalarContext.OPTION_VALUE,
        }
    )
    supersedes = frozenset({"quote-style"})

    @override
    def evaluate(self, node: rep.StyleNode, ctx: RuleContext) -> Sequence[Diagnostic]:
        assert isinstance(node, rep.Scalar)

        if node.kind is not rep.ValueKind.BOOLEAN:
            return []
        # Quoting a canonical literal is a quoting problem, not a spelling one.
        if node.text in ("true", "false"):
            return []

        expected = "true" if node.text.lower() in TRUE_TOKENS else "false"
        if node.quote_style.is_quoted:
            message = f"Use the unquoted boolean {expected} instead of {node.raw}"
        else:
            message = f"Use {expected} instead of {node.raw}"
        return [self.diagnostic(ctx, node, message)]
