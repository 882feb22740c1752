from __future__ import annotations

from typing import final, override

from collections.abc import Sequence

from playstyle.representation import representation as rep

from ..base import Diagnostic, Rule, RuleContext

#: Kinds of values that must be written without quotes.
_UNQUOTED_KINDS = frozenset(
    {rep.ValueKind.BOOLEAN, rep.ValueKind.NUMBER, rep.ValueKind.VARIABLE}
)


@final
class QuoteStyleRule(Rule):
    description = (
        "Quote strings with double quotes, and never quote booleans, numbers "
        "or variable names"
    )
    applies_to = frozenset({rep.NodeKind.SCALAR})
    contexts = frozenset(
        {
            rep.ScalarContext.MODULE_PARAMETER,
            rep.ScalarContext.VARIABLE_VALUE,
            rep.ScalarContext.OPTION_VALUE,
            rep.ScalarContext.VARIABLE_NAME,
        }
    )

    @override
    def evaluate(self, node: rep.StyleNode, ctx: RuleContext) -> Sequence[Diagnostic]:
        assert isinstance(node, rep.Scalar)

        if node.kind in _UNQUOTED_KINDS:
            if node.quote_style.is_quoted:
                return [
                    self.diagnostic(
                        ctx,
                        node,
                        f"Do not quote {node.kind.value.replace('-', ' ')}s: {node.raw}",
                    )
                ]
            return []

        if node.kind is not rep.ValueKind.STRING:
            return []

        match node.quote_style:
            case rep.QuoteStyle.DOUBLE | rep.QuoteStyle.FOLDED | rep.QuoteStyle.LITERAL:
                return []
            case rep.QuoteStyle.SINGLE if '"' in node.text:
                return []
            case rep.QuoteStyle.SINGLE:
                message = f"Use double quotes instead of single quotes: {node.raw}"
            case _:
                message = f"Wrap string values in double quotes: {node.raw}"
        return [self.diagnostic(ctx, node, message)]
