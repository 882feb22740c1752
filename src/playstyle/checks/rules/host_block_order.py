from __future__ import annotations

from typing import final, override

from collections.abc import Sequence

from playstyle.representation import representation as rep
from playstyle.representation.ansible_types import PLAY_TASK_SECTIONS
from playstyle.utils import first_unsorted

from ..base import Diagnostic, Rule, RuleContext

_DECLARATION_RANK = 0
_OPTIONS_RANK = 1
_SECTION_RANKS = {
    "hosts": _DECLARATION_RANK,
    "name": _DECLARATION_RANK,
    **{section: idx + 2 for idx, section in enumerate(PLAY_TASK_SECTIONS)},
}


def _rank(key: str) -> int:
    return _SECTION_RANKS.get(key, _OPTIONS_RANK)


def _describe(key: str) -> str:
    rank = _rank(key)
    if rank == _DECLARATION_RANK:
        return f"the host declaration ({key})"
    if rank == _OPTIONS_RANK:
        return f"the host option {key}"
    return f"the {key} section"


@final
class HostBlockOrderRule(Rule):
    description = (
        "Order plays as hosts, options in alphabetical order, pre_tasks, roles, "
        "tasks, post_tasks and handlers"
    )
    applies_to = frozenset({rep.NodeKind.HOST_BLOCK})

    @override
    def evaluate(self, node: rep.StyleNode, ctx: RuleContext) -> Sequence[Diagnostic]:
        assert isinstance(node, rep.HostBlock)

        results: list[Diagnostic] = []
        furthest: rep.KeyValue | None = None
        for entry in node.fields:
            if furthest is not None and _rank(entry.name) < _rank(furthest.name):
                results.append(
                    self.diagnostic(
                        ctx,
                        entry,
                        f"Section order: {_describe(entry.name)} must come before "
                        f"{_describe(furthest.name)}",
                    )
                )
                break
            if furthest is None or _rank(entry.name) > _rank(furthest.name):
                furthest = entry

        unsorted = first_unsorted(entry.name for entry in node.options)
        if unsorted is not None:
            earlier, later = unsorted
            entry = next(entry for entry in node.options if entry.name == later)
            results.append(
                self.diagnostic(
                    ctx,
                    entry,
                    f"Host options must be in alphabetical order: {later} must come "
                    f"before {earlier}",
                )
            )
        return results
