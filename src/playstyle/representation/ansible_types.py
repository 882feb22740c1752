"""Facilitate access to the bits of Ansible the style model relies on."""
from __future__ import annotations

from ansible import constants
from ansible.module_utils.parsing.convert_bool import BOOLEANS_FALSE as BOOLEANS_FALSE
from ansible.module_utils.parsing.convert_bool import BOOLEANS_TRUE as BOOLEANS_TRUE
from ansible.parsing.vault import is_encrypted as is_encrypted

C = constants

#: Tokens Ansible accepts as booleans, as strings.
BOOLEAN_TOKENS = frozenset(
    str(token).lower() for token in BOOLEANS_TRUE | BOOLEANS_FALSE
)

#: Tokens Ansible accepts as true, as strings.
TRUE_TOKENS = frozenset(str(token).lower() for token in BOOLEANS_TRUE)

#: Words YAML 1.1 resolves to booleans when they appear unquoted.
YAML_BOOLEAN_WORDS = frozenset({"true", "false", "yes", "no", "on", "off"})

#: File extensions of YAML files.
YAML_EXTENSIONS = tuple(ext for ext in C.YAML_FILENAME_EXTENSIONS if ext != ".json")

#: Playbook and block keywords that accept a boolean value.
BOOLEAN_DIRECTIVES = frozenset(
    {
        "any_errors_fatal",
        "become",
        "check_mode",
        "delegate_facts",
        "diff",
        "force_handlers",
        "gather_facts",
        "ignore_errors",
        "ignore_unreachable",
        "no_log",
        "run_once",
        "su",
        "sudo",
    }
)

#: Keywords that hold conditional expressions.
CONDITIONAL_DIRECTIVES = frozenset({"changed_when", "failed_when", "until", "when"})

#: Keywords whose values name something rather than carry data.
IDENTIFIER_DIRECTIVES = frozenset(
    {
        "action",
        "become_method",
        "delegate_to",
        "hosts",
        "listen",
        "local_action",
        "name",
        "notify",
    }
)

#: Keywords that are valid on tasks. Any other key is the module.
TASK_KEYWORDS = frozenset(
    {
        "action",
        "any_errors_fatal",
        "args",
        "async",
        "become",
        "become_exe",
        "become_flags",
        "become_method",
        "become_user",
        "changed_when",
        "check_mode",
        "collections",
        "connection",
        "debugger",
        "delay",
        "delegate_facts",
        "delegate_to",
        "diff",
        "environment",
        "failed_when",
        "ignore_errors",
        "ignore_unreachable",
        "listen",
        "local_action",
        "loop",
        "loop_control",
        "module_defaults",
        "name",
        "no_log",
        "notify",
        "poll",
        "port",
        "register",
        "remote_user",
        "retries",
        "run_once",
        "tags",
        "throttle",
        "timeout",
        "until",
        "vars",
        "when",
        # Legacy keywords
        "always_run",
        "static",
        "su",
        "su_exe",
        "su_flags",
        "su_pass",
        "su_user",
        "sudo",
        "sudo_exe",
        "sudo_flags",
        "sudo_pass",
        "sudo_user",
    }
)

#: Keys that open a block of tasks.
BLOCK_SECTIONS = ("block", "rescue", "always")

#: Task list sections of a play, in their required order.
PLAY_TASK_SECTIONS = ("pre_tasks", "roles", "tasks", "post_tasks", "handlers")

#: Keys identifying a role in a role entry.
ROLE_NAME_KEYS = ("role", "name")

#: Top-level keys that include another playbook.
PLAYBOOK_INCLUDE_KEYS = ("include", "import_playbook")

#: Legacy privilege escalation keywords and their replacements.
LEGACY_BECOME_KEYWORDS = {
    "sudo": "become",
    "sudo_user": "become_user",
    "sudo_exe": "become_exe",
    "sudo_flags": "become_flags",
    "sudo_pass": "ansible_become_password",
    "su": "become",
    "su_user": "become_user",
    "su_exe": "become_exe",
    "su_flags": "become_flags",
    "su_pass": "ansible_become_password",
}


def is_loop_keyword(key: str) -> bool:
    return key == "loop" or key.startswith("with_")


def is_task_keyword(key: str) -> bool:
    return key in TASK_KEYWORDS or is_loop_keyword(key)
