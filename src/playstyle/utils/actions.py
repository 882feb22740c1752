"""Classification of task actions."""

from __future__ import annotations

from ansible.utils.fqcn import add_internal_fqcns

_SET_FACT = frozenset(add_internal_fqcns(("set_fact",)))
_ASSERT = frozenset(add_internal_fqcns(("assert",)))
_INCLUDE_VARS = frozenset(add_internal_fqcns(("include_vars",)))
_INCLUDE_IMPORT_TASKS = frozenset(
    add_internal_fqcns(("include", "include_tasks", "import_tasks"))
)
_IMPORT_PLAYBOOK = frozenset(add_internal_fqcns(("import_playbook",)))
_INCLUDE_IMPORT_ROLE = frozenset(add_internal_fqcns(("include_role", "import_role")))
# Modules that take a free-form command string instead of parameters.
_FREE_FORM = frozenset(
    add_internal_fqcns(("command", "shell", "raw", "script", "win_command", "win_shell"))
)


def is_set_fact(action: str) -> bool:
    return action in _SET_FACT


def is_assert(action: str) -> bool:
    return action in _ASSERT


def is_include_vars(action: str) -> bool:
    return action in _INCLUDE_VARS


def is_import_include_tasks(action: str) -> bool:
    return action in _INCLUDE_IMPORT_TASKS


def is_import_playbook(action: str) -> bool:
    return action in _IMPORT_PLAYBOOK


def is_import_include_role(action: str) -> bool:
    return action in _INCLUDE_IMPORT_ROLE


def is_file_include(action: str) -> bool:
    """Whether the action loads another YAML file given as its argument."""
    return (
        is_import_include_tasks(action)
        or is_import_playbook(action)
        or is_include_vars(action)
    )


def is_free_form(action: str) -> bool:
    """Whether the action accepts a free-form string argument."""
    return action in _FREE_FORM or is_file_include(action)
