from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, override

import abc
import re
from collections.abc import Mapping, Sequence

from attrs import field, frozen
from pydantic import BaseModel

from playstyle.representation import representation as rep
from playstyle.types import Severity

if TYPE_CHECKING:
    from playstyle.config import LintConfig

#: Rule identifiers for problems that prevent evaluating a file. These are not
#: registered rules, and cannot be disabled.
PARSE_ERROR = "parse-error"
MALFORMED_PLAYBOOK = "malformed-playbook"
TIMEOUT = "timeout"
IO_ERROR = "io-error"

FATAL_RULE_IDS = frozenset({PARSE_ERROR, MALFORMED_PLAYBOOK, TIMEOUT, IO_ERROR})


class _FrozenModel(BaseModel, frozen=True, strict=True, extra="forbid"):
    pass


class Location(_FrozenModel, frozen=True):
    file: str
    line: int
    column: int

    @override
    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


class Diagnostic(_FrozenModel, frozen=True):
    """A style violation found in a file."""

    #: Identifier of the rule that was violated.
    rule_id: str
    severity: Severity
    location: Location
    #: Human-readable explanation of the violation.
    message: str

    @override
    def __str__(self) -> str:
        return f"{self.location}: [{self.rule_id}] {self.message}"


@frozen
class RuleContext:
    """Everything a rule may inspect besides the node it is evaluating."""

    config: LintConfig
    #: Path of the file under evaluation.
    path: str
    document: rep.PlaybookDocument
    #: Ancestors of the node, innermost last.
    parents: tuple[rep.StyleNode, ...] = ()
    #: The previous top-level block, for top-level blocks only.
    previous: rep.Block | None = None
    #: The next top-level block, for top-level blocks only.
    next: rep.Block | None = None
    #: Known vault status of referenced files, by reference text.
    vault_references: Mapping[str, bool] = field(factory=dict)

    @property
    def parent(self) -> rep.StyleNode | None:
        return self.parents[-1] if self.parents else None

    def location(
        self, node: rep.StyleNode, position: rep.Position | None = None
    ) -> Location:
        pos = position or node.position
        return Location(file=self.path, line=pos.line, column=pos.column)


def _rule_id_from_class_name(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "-", name.removesuffix("Rule")).lower()


class Rule(abc.ABC):
    """A style rule, evaluated on every node of the kinds it applies to."""

    #: Stable identifier, derived from the class name when not given.
    id: ClassVar[str] = ""
    description: ClassVar[str]
    #: Severity of the rule's diagnostics, unless configured otherwise.
    severity: ClassVar[Severity] = Severity.ERROR
    #: Node kinds the rule is dispatched on.
    applies_to: ClassVar[frozenset[rep.NodeKind]]
    #: Scalar contexts the rule is dispatched on. None for all contexts.
    contexts: ClassVar[frozenset[rep.ScalarContext] | None] = None
    #: Rules whose diagnostics on the same node are dropped when this rule
    #: reports on that node.
    supersedes: ClassVar[frozenset[str]] = frozenset()

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)

        if not cls.id:
            cls.id = _rule_id_from_class_name(cls.__name__)

    def accepts(self, node: rep.StyleNode) -> bool:
        """Whether the rule should be dispatched on the node."""
        if node.node_kind not in self.applies_to:
            return False
        if self.contexts is not None and isinstance(node, rep.Scalar):
            return node.context in self.contexts
        return True

    @abc.abstractmethod
    def evaluate(self, node: rep.StyleNode, ctx: RuleContext) -> Sequence[Diagnostic]:
        raise NotImplementedError("To be implemented by subclass")

    def diagnostic(
        self,
        ctx: RuleContext,
        node: rep.StyleNode,
        message: str,
        position: rep.Position | None = None,
    ) -> Diagnostic:
        return Diagnostic(
            rule_id=self.id,
            severity=self.severity,
            location=ctx.location(node, position),
            message=message,
        )
