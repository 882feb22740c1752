from __future__ import annotations

from typing import final, override

from collections.abc import Callable, Sequence

from playstyle.representation import representation as rep
from playstyle.representation.ansible_types import is_loop_keyword
from playstyle.utils import first_unsorted

from ..base import Diagnostic, Rule, RuleContext

_TASK_GROUPS = ("name", "vars", "module", "args", "loop", "loop_control", "options")
_BLOCK_GROUPS = ("name", "vars", "block", "rescue", "always", "options")


def _task_group(task: rep.Task) -> Callable[[rep.KeyValue], str]:
    def group(entry: rep.KeyValue) -> str:
        if task.module is not None and entry is task.module.entry:
            return "module"
        if entry.name in ("name", "vars", "args", "loop_control"):
            return entry.name
        if is_loop_keyword(entry.name):
            return "loop"
        return "options"

    return group


def _block_group(entry: rep.KeyValue) -> str:
    if entry.name in _BLOCK_GROUPS:
        return entry.name
    return "options"


def _describe(group: str, entry: rep.KeyValue) -> str:
    if group == "options":
        return f"the option {entry.name}"
    if group == "module":
        return f"the module {entry.name}"
    return entry.name


@final
class TaskFieldOrderRule(Rule):
    description = (
        "Order tasks as name, vars, module, module parameters in alphabetical "
        "order, loop, and other options in alphabetical order"
    )
    applies_to = frozenset({rep.NodeKind.TASK, rep.NodeKind.TASK_BLOCK})

    @override
    def evaluate(self, node: rep.StyleNode, ctx: RuleContext) -> Sequence[Diagnostic]:
        if isinstance(node, rep.Task):
            results = self._check_order(node.fields, _TASK_GROUPS, _task_group(node), ctx)
            if node.module is not None:
                results.extend(
                    self._check_alphabetical(node.module.args, "Module parameters", ctx)
                )
                if node.module.extra_args is not None:
                    results.extend(
                        self._check_alphabetical(
                            node.module.extra_args.value, "Module parameters", ctx
                        )
                    )
        else:
            assert isinstance(node, rep.TaskBlock)
            results = self._check_order(node.fields, _BLOCK_GROUPS, _block_group, ctx)

        results.extend(self._check_alphabetical_entries(node.options, "Task options", ctx))
        return results

    def _check_order(
        self,
        fields: Sequence[rep.KeyValue],
        groups: Sequence[str],
        group_of: Callable[[rep.KeyValue], str],
        ctx: RuleContext,
    ) -> list[Diagnostic]:
        furthest: tuple[int, rep.KeyValue] | None = None
        for entry in fields:
            group = group_of(entry)
            rank = groups.index(group)
            if furthest is not None and rank < furthest[0]:
                prev_rank, prev = furthest
                return [
                    self.diagnostic(
                        ctx,
                        entry,
                        f"Field order: {_describe(group, entry)} must come before "
                        f"{_describe(groups[prev_rank], prev)}",
                    )
                ]
            if furthest is None or rank > furthest[0]:
                furthest = (rank, entry)
        return []

    def _check_alphabetical(
        self, node: rep.StyleNode, what: str, ctx: RuleContext
    ) -> list[Diagnostic]:
        if not isinstance(node, rep.MappingNode):
            return []
        return self._check_alphabetical_entries(node.entries, what, ctx)

    def _check_alphabetical_entries(
        self, entries: Sequence[rep.KeyValue], what: str, ctx: RuleContext
    ) -> list[Diagnostic]:
        unsorted = first_unsorted(entry.name for entry in entries)
        if unsorted is None:
            return []
        earlier, later = unsorted
        entry = next(entry for entry in entries if entry.name == later)
        return [
            self.diagnostic(
                ctx,
                entry,
                f"{what} must be in alphabetical order: {later} must come before {earlier}",
            )
        ]
