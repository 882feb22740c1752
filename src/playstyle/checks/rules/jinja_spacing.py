from __future__ import annotations

from typing import final, override

from collections.abc import Iterator, Sequence

from jinja2 import Environment, TemplateSyntaxError
from loguru import logger

from playstyle.representation import representation as rep

from ..base import Diagnostic, Rule, RuleContext


def _expressions(env: Environment, text: str) -> Iterator[tuple[str, bool]]:
    """
    Iterate over the `{{ ... }}` expressions of a template, together with
    whether they are padded by exactly one space on either side.
    """
    expression: list[tuple[str, str]] | None = None
    for _, token_type, value in env.lex(text):
        if token_type == "variable_begin":
            expression = [(token_type, value)]
            continue
        if expression is None:
            continue

        expression.append((token_type, value))
        if token_type == "variable_end":
            source = "".join(v for _, v in expression)
            after_begin = expression[1]
            before_end = expression[-2]
            padded = (
                len(expression) > 2
                and after_begin == ("whitespace", " ")
                and before_end == ("whitespace", " ")
            )
            yield source, padded
            expression = None


@final
class JinjaSpacingRule(Rule):
    description = "Put exactly one space on either side of an expression inside {{ }}"
    applies_to = frozenset({rep.NodeKind.SCALAR})

    def __init__(self) -> None:
        self._env = Environment()

    @override
    def evaluate(self, node: rep.StyleNode, ctx: RuleContext) -> Sequence[Diagnostic]:
        assert isinstance(node, rep.Scalar)

        if not isinstance(node.value, str) or "{{" not in node.text:
            return []

        try:
            expressions = list(_expressions(self._env, node.text))
        except TemplateSyntaxError as e:
            logger.debug(f"{ctx.path}:{node.position}: skipping invalid template: {e}")
            return []

        return [
            self.diagnostic(
                ctx,
                node,
                f"Use exactly one space inside the braces of {source}",
            )
            for source, padded in expressions
            if not padded
        ]
