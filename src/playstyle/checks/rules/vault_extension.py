from __future__ import annotations

from typing import final, override

from collections.abc import Sequence
from pathlib import PurePath

from playstyle.representation import representation as rep

from ..base import Diagnostic, Rule, RuleContext
from .file_extension import has_vault_extension


@final
class VaultExtensionRule(Rule):
    description = "Give vault-encrypted YAML files the .vault.yml extension"
    applies_to = frozenset({rep.NodeKind.SCALAR, rep.NodeKind.DOCUMENT})

    @override
    def evaluate(self, node: rep.StyleNode, ctx: RuleContext) -> Sequence[Diagnostic]:
        if isinstance(node, rep.PlaybookDocument):
            if not node.encrypted:
                return []
            name = PurePath(node.path).name
        else:
            assert isinstance(node, rep.Scalar)
            if not node.is_reference or not ctx.vault_references.get(node.text):
                return []
            name = node.text

        if name.endswith(ctx.config.vault_extensions()):
            return []
        if has_vault_extension(name, ctx):
            expected = " or ".join(ctx.config.vault_extensions())
            message = f"Use the lowercase {expected} extension for {name}"
        else:
            message = f"{name} is vault-encrypted, use the {ctx.config.vault_extensions()[0]} extension"
        return [self.diagnostic(ctx, node, message)]
