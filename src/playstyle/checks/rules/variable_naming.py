from __future__ import annotations

from typing import final, override

import re
from collections.abc import Sequence

from playstyle.representation import representation as rep

from ..base import Diagnostic, Rule, RuleContext

_SNAKE_CASE_RE = re.compile(r"^[a-z_][a-z0-9_]*$")


@final
class VariableNamingRule(Rule):
    description = "Name variables in lowercase, with underscores between words"
    applies_to = frozenset({rep.NodeKind.ENTRY, rep.NodeKind.SCALAR})
    contexts = frozenset({rep.ScalarContext.VARIABLE_NAME})

    @override
    def evaluate(self, node: rep.StyleNode, ctx: RuleContext) -> Sequence[Diagnostic]:
        if isinstance(node, rep.KeyValue):
            name = node.key
            if name.context is not rep.ScalarContext.VARIABLE_NAME:
                return []
        else:
            assert isinstance(node, rep.Scalar)
            name = node

        if not isinstance(name.value, str) or rep.is_template(name.text):
            return []
        if _SNAKE_CASE_RE.match(name.text):
            return []
        return [
            self.diagnostic(
                ctx,
                name,
                f"Variable name {name.text!r} should be lowercase with underscores",
            )
        ]
