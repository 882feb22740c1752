from __future__ import annotations

import pytest

from playstyle.checks.rules.map_syntax import has_inline_parameters

from conftest import Linter


def _task(*lines: str) -> str:
    body = "\n".join(f"    {line}" for line in lines)
    return f"- hosts: all\n  tasks:\n{body}\n"


def describe_map_syntax() -> None:

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("path=/tmp state=touch", True),
            ("chdir=/tmp", True),
            ("echo a=b", True),
            ("echo hello", False),
            ("x == 1", False),
        ],
    )
    def detects_inline_parameters(text: str, expected: bool) -> None:
        assert has_inline_parameters(text) is expected

    def flags_key_value_parameters(lint: Linter) -> None:
        results = lint(_task("- file: path=/tmp state=touch"), only="map-syntax")

        assert [diag.message for diag in results] == [
            "Use a multi-line mapping for the parameters of file, not key=value pairs"
        ]
        assert (results[0].location.line, results[0].location.column) == (3, 13)

    def flags_flow_mapping_parameters(lint: Linter) -> None:
        results = lint(_task('- file: {path: "/tmp"}'), only="map-syntax")

        assert [diag.message for diag in results] == [
            "Use a multi-line mapping for the parameters of file, not inline braces"
        ]

    def flags_parameters_after_action(lint: Linter) -> None:
        results = lint(_task("- action: file path=/tmp"), only="map-syntax")

        assert len(results) == 1

    def flags_parameters_after_included_file(lint: Linter) -> None:
        results = lint(_task("- include_tasks: more.yml tags=x"), only="map-syntax")

        assert len(results) == 1

    def accepts_free_form_commands(lint: Linter) -> None:
        results = lint(
            _task("- command: echo a=b", "- shell: FOO=1 make"), only="map-syntax"
        )

        assert results == []

    def ignores_equals_signs_in_templates(lint: Linter) -> None:
        results = lint(
            _task("- debug: \"{{ lookup('env', 'A=B') }}\""), only="map-syntax"
        )

        assert results == []

    def accepts_action_without_parameters(lint: Linter) -> None:
        assert lint(_task("- action: ec2_facts"), only="map-syntax") == []

    def flags_role_styles(lint: Linter) -> None:
        results = lint(
            """
            - hosts: all
              roles:
                - { role: flow_role }
                - inline_role, port=80
                - plain_role
                - role: mapped_role
                  port: 80
            """,
            only="map-syntax",
        )

        assert [diag.location.line for diag in results] == [3, 4]

    def flags_bare_role_mapping(lint: Linter) -> None:
        results = lint(
            "- hosts: all\n  roles:\n    role: bare_role\n", only="map-syntax"
        )

        assert [diag.message for diag in results] == [
            "List roles under roles as a sequence, not as a bare mapping"
        ]


def describe_multiline_array() -> None:

    def flags_inline_list(lint: Linter) -> None:
        results = lint(
            _task("- debug:", "    var: item", "  with_items: [1, 2]"),
            only="multiline-array",
        )

        assert [diag.message for diag in results] == [
            "Use a multi-line list with one item per line, not [...]"
        ]

    def accepts_empty_inline_list(lint: Linter) -> None:
        assert lint("- hosts: all\n  tasks: []\n", only="multiline-array") == []

    def reports_nested_lists_once(lint: Linter) -> None:
        results = lint(
            "- hosts: all\n  vars:\n    matrix: [[1, 2], [3]]\n",
            only="multiline-array",
        )

        assert len(results) == 1

    def ignores_lists_inside_flow_mappings(lint: Linter) -> None:
        results = lint(
            "- hosts: all\n  vars:\n    config: {ports: [80, 443]}\n",
            only="multiline-array",
        )

        assert results == []


def describe_host_block_order() -> None:

    def accepts_canonical_order(lint: Linter) -> None:
        results = lint(
            """
            - hosts: all
              name: a play
              become: true
              remote_user: "root"
              pre_tasks: []
              roles: []
              tasks: []
              post_tasks: []
              handlers: []
            """,
            only="host-block-order",
        )

        assert results == []

    def flags_tasks_before_roles(lint: Linter) -> None:
        results = lint(
            """
            - hosts: all
              tasks:
                - debug:
                    msg: "hello"
              roles:
                - common
            """,
            only="host-block-order",
        )

        assert [diag.message for diag in results] == [
            "Section order: the roles section must come before the tasks section"
        ]
        assert results[0].location.line == 5

    def flags_option_after_section(lint: Linter) -> None:
        results = lint(
            "- hosts: all\n  tasks: []\n  become: true\n", only="host-block-order"
        )

        assert [diag.message for diag in results] == [
            "Section order: the host option become must come before the tasks section"
        ]

    def flags_declaration_after_options(lint: Linter) -> None:
        results = lint(
            "- become: true\n  hosts: all\n", only="host-block-order"
        )

        assert [diag.message for diag in results] == [
            "Section order: the host declaration (hosts) must come before "
            "the host option become"
        ]

    def flags_unsorted_options(lint: Linter) -> None:
        results = lint(
            '- hosts: all\n  remote_user: "root"\n  become: true\n',
            only="host-block-order",
        )

        assert [diag.message for diag in results] == [
            "Host options must be in alphabetical order: become must come before remote_user"
        ]
        assert results[0].location.line == 3


def describe_task_field_order() -> None:

    def accepts_canonical_order(lint: Linter) -> None:
        results = lint(
            _task(
                "- name: copy files",
                "  vars:",
                "    mode: \"0644\"",
                "  copy:",
                "    dest: \"/tmp/{{ item }}\"",
                "    mode: \"{{ mode }}\"",
                "    src: \"{{ item }}\"",
                "  loop:",
                "    - \"a\"",
                "  loop_control:",
                "    label: \"{{ item }}\"",
                "  become: true",
                "  when: item is defined",
            ),
            only="task-field-order",
        )

        assert results == []

    def flags_name_after_module(lint: Linter) -> None:
        results = lint(
            _task("- debug:", "    msg: \"hello\"", "  name: say hello"),
            only="task-field-order",
        )

        assert [diag.message for diag in results] == [
            "Field order: name must come before the module debug"
        ]

    def flags_module_after_options(lint: Linter) -> None:
        results = lint(
            _task("- become: true", "  file:", "    path: \"/tmp\""),
            only="task-field-order",
        )

        assert [diag.message for diag in results] == [
            "Field order: the module file must come before the option become"
        ]

    def flags_loop_before_module(lint: Linter) -> None:
        results = lint(
            _task("- with_items:", "    - 1", "  debug:", "    var: item"),
            only="task-field-order",
        )

        assert [diag.message for diag in results] == [
            "Field order: the module debug must come before with_items"
        ]

    def flags_unsorted_module_parameters(lint: Linter) -> None:
        results = lint(
            _task("- file:", "    path: \"/tmp\"", "    mode: \"0644\""),
            only="task-field-order",
        )

        assert [diag.message for diag in results] == [
            "Module parameters must be in alphabetical order: mode must come before path"
        ]

    def flags_unsorted_args(lint: Linter) -> None:
        results = lint(
            _task(
                "- command: \"ls\"",
                "  args:",
                "    creates: \"/tmp/b\"",
                "    chdir: \"/tmp\"",
            ),
            only="task-field-order",
        )

        assert len(results) == 1
        assert results[0].location.line == 6

    def flags_unsorted_options(lint: Linter) -> None:
        results = lint(
            _task("- debug:", "    var: x", "  when: x", "  become: true"),
            only="task-field-order",
        )

        assert [diag.message for diag in results] == [
            "Task options must be in alphabetical order: become must come before when"
        ]

    def checks_blocks(lint: Linter) -> None:
        results = lint(
            _task(
                "- become: true",
                "  block:",
                "    - debug:",
                "        var: x",
            ),
            only="task-field-order",
        )

        assert [diag.message for diag in results] == [
            "Field order: block must come before the option become"
        ]


def describe_sudo_become() -> None:

    def flags_sudo_on_tasks(lint: Linter) -> None:
        results = lint(
            _task("- command: \"ls\"", "  sudo: true", "  sudo_user: root"),
            only="sudo-become",
        )

        assert [diag.message for diag in results] == [
            "Use become instead of sudo",
            "Use become_user instead of sudo_user",
        ]

    def flags_su_on_plays(lint: Linter) -> None:
        results = lint("- hosts: all\n  su: true\n", only="sudo-become")

        assert [diag.message for diag in results] == [
            "Use become instead of su, with become_method set to su"
        ]

    def flags_sudo_on_blocks_and_roles(lint: Linter) -> None:
        results = lint(
            """
            - hosts: all
              roles:
                - role: common
                  sudo: true
              tasks:
                - block:
                    - command: "ls"
                  sudo: true
            """,
            only="sudo-become",
        )

        assert [diag.location.line for diag in results] == [4, 8]

    def accepts_become(lint: Linter) -> None:
        results = lint(
            _task("- command: \"ls\"", "  become: true", "  become_user: root"),
            only="sudo-become",
        )

        assert results == []
