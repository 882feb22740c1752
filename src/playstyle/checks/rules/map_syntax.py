from __future__ import annotations

from typing import final, override

import re
from collections.abc import Sequence

from playstyle.representation import representation as rep
from playstyle.utils import actions

from ..base import Diagnostic, Rule, RuleContext

_KEY_VALUE_RE = re.compile(r"(?:^|\s)[A-Za-z_][\w.]*=")
_TEMPLATE_BODY_RE = re.compile(r"{{.*?}}|{%.*?%}", re.DOTALL)


def _strip_templates(text: str) -> str:
    return _TEMPLATE_BODY_RE.sub("", text)


def has_inline_parameters(text: str) -> bool:
    """Whether a string passes parameters as `key=value` pairs."""
    return _KEY_VALUE_RE.search(text) is not None


@final
class MapSyntaxRule(Rule):
    description = (
        "Pass module and role parameters as a multi-line mapping, and list roles"
    )
    applies_to = frozenset({rep.NodeKind.MODULE, rep.NodeKind.ROLE})

    @override
    def evaluate(self, node: rep.StyleNode, ctx: RuleContext) -> Sequence[Diagnostic]:
        if isinstance(node, rep.ModuleInvocation):
            return self._evaluate_module(node, ctx)
        assert isinstance(node, rep.RoleRef)
        return self._evaluate_role(node, ctx)

    def _evaluate_module(
        self, node: rep.ModuleInvocation, ctx: RuleContext
    ) -> Sequence[Diagnostic]:
        args = node.args
        if isinstance(args, rep.MappingNode) and args.flow:
            return [
                self.diagnostic(
                    ctx,
                    args,
                    f"Use a multi-line mapping for the parameters of {node.name}, "
                    "not inline braces",
                )
            ]

        if not isinstance(args, rep.Scalar) or not isinstance(args.value, str):
            return []

        if node.is_action_directive:
            # The module name precedes the parameters.
            parameters = args.text.partition(" ")[2]
        elif actions.is_file_include(node.name):
            # The file name precedes the parameters.
            parameters = args.text.strip().partition(" ")[2]
        elif node.free_form:
            return []
        else:
            parameters = args.text

        if not has_inline_parameters(_strip_templates(parameters)):
            return []
        return [
            self.diagnostic(
                ctx,
                args,
                f"Use a multi-line mapping for the parameters of {node.name}, "
                "not key=value pairs",
            )
        ]

    def _evaluate_role(self, node: rep.RoleRef, ctx: RuleContext) -> Sequence[Diagnostic]:
        results: list[Diagnostic] = []
        if not node.listed:
            results.append(
                self.diagnostic(
                    ctx,
                    node,
                    "List roles under roles as a sequence, not as a bare mapping",
                )
            )
        if node.style is rep.RoleStyle.FLOW:
            results.append(
                self.diagnostic(
                    ctx, node, "Use a multi-line mapping for the role, not inline braces"
                )
            )
        elif node.style is rep.RoleStyle.INLINE:
            results.append(
                self.diagnostic(
                    ctx,
                    node,
                    "Use a multi-line mapping for role parameters, not an inline string",
                )
            )
        return results
