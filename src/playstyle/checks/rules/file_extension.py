from __future__ import annotations

from typing import final, override

from collections.abc import Sequence
from pathlib import PurePath, PurePosixPath

from playstyle.representation import representation as rep
from playstyle.representation.ansible_types import YAML_EXTENSIONS

from ..base import Diagnostic, Rule, RuleContext


def has_vault_extension(name: str, ctx: RuleContext) -> bool:
    return name.lower().endswith(ctx.config.vault_extensions())


@final
class FileExtensionRule(Rule):
    description = "Use the canonical lowercase extension for YAML files"
    applies_to = frozenset({rep.NodeKind.SCALAR, rep.NodeKind.DOCUMENT})

    @override
    def evaluate(self, node: rep.StyleNode, ctx: RuleContext) -> Sequence[Diagnostic]:
        if isinstance(node, rep.PlaybookDocument):
            if node.encrypted:
                return []
            return self._check(node, PurePath(node.path).name, True, ctx)

        assert isinstance(node, rep.Scalar)
        if not node.is_reference or rep.is_template(node.text):
            return []
        encrypted = ctx.vault_references.get(node.text)
        if encrypted:
            return []
        return self._check(node, node.text, encrypted is False, ctx)

    def _check(
        self,
        node: rep.StyleNode,
        name: str,
        known_unencrypted: bool,
        ctx: RuleContext,
    ) -> list[Diagnostic]:
        if known_unencrypted and has_vault_extension(name, ctx):
            return [
                self.diagnostic(
                    ctx,
                    node,
                    f"{name} is not vault-encrypted, do not use a vault extension",
                )
            ]

        suffix = PurePosixPath(name).suffix
        if suffix.lower() not in YAML_EXTENSIONS:
            return []
        allowed = ctx.config.allowed_extensions()
        if suffix in allowed:
            return []
        return [
            self.diagnostic(
                ctx,
                node,
                f"Use the {' or '.join(allowed)} extension instead of {suffix} for {name}",
            )
        ]
