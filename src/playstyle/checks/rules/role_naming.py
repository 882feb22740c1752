from __future__ import annotations

from typing import final, override

import re
from collections.abc import Sequence

from playstyle.representation import representation as rep
from playstyle.utils import actions

from ..base import Diagnostic, Rule, RuleContext

# Collection prefixes such as `namespace.collection.` are allowed.
_ROLE_NAME_RE = re.compile(r"^[a-z][a-z0-9_]*(\.[a-z][a-z0-9_]*)*$")


@final
class RoleNamingRule(Rule):
    description = "Name roles in lowercase, with underscores between words"
    applies_to = frozenset({rep.NodeKind.ROLE, rep.NodeKind.TASK})

    @override
    def evaluate(self, node: rep.StyleNode, ctx: RuleContext) -> Sequence[Diagnostic]:
        name = self._role_name(node)
        if name is None or not isinstance(name.value, str):
            return []
        # Paths to roles are named by the file system.
        if rep.is_template(name.text) or "/" in name.text:
            return []
        if _ROLE_NAME_RE.match(name.text):
            return []
        return [
            self.diagnostic(
                ctx,
                name,
                f"Role name {name.text!r} should be lowercase with underscores",
            )
        ]

    def _role_name(self, node: rep.StyleNode) -> rep.Scalar | None:
        if isinstance(node, rep.RoleRef):
            if node.style is rep.RoleStyle.INLINE:
                return None
            return node.name

        assert isinstance(node, rep.Task)
        module = node.module
        if module is None or not actions.is_import_include_role(module.name):
            return None
        if not isinstance(module.args, rep.MappingNode):
            return None
        entry = module.args.get("name")
        if entry is None or not isinstance(entry.value, rep.Scalar):
            return None
        return entry.value
