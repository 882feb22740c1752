from __future__ import annotations

from pathlib import Path

import pytest

from conftest import Linter

VAULT_TEXT = "$ANSIBLE_VAULT;1.1;AES256\n66386439653236336462626566653063\n"


def describe_variable_naming() -> None:

    def flags_camel_case_fact(lint: Linter) -> None:
        results = lint(
            """
            - hosts: all
              tasks:
                - set_fact:
                    myBoolean: true
            """,
            only="variable-naming",
        )

        assert [diag.message for diag in results] == [
            "Variable name 'myBoolean' should be lowercase with underscores"
        ]
        assert (results[0].location.line, results[0].location.column) == (4, 9)

    def flags_play_and_role_variables(lint: Linter) -> None:
        results = lint(
            """
            - hosts: all
              vars:
                HttpPort: 80
                http_host: "example.org"
              roles:
                - role: web
                  maxClients: 200
            """,
            only="variable-naming",
        )

        assert [diag.location.line for diag in results] == [3, 7]

    def flags_registered_and_loop_variables(lint: Linter) -> None:
        results = lint(
            """
            - hosts: all
              tasks:
                - command: "ls"
                  register: lsResult
                - debug:
                    var: outer-item
                  loop: "{{ items }}"
                  loop_control:
                    loop_var: outerItem
            """,
            only="variable-naming",
        )

        assert [diag.location.line for diag in results] == [4, 9]

    def accepts_snake_case(lint: Linter) -> None:
        results = lint(
            """
            - hosts: all
              vars:
                _private: 1
                release_2: "x"
              tasks:
                - set_fact:
                    cacheable: true
                    my_fact: "y"
            """,
            only="variable-naming",
        )

        assert results == []

    def ignores_templated_names(lint: Linter) -> None:
        results = lint(
            '- hosts: all\n  tasks:\n    - set_fact:\n        "{{ prefix }}_Var": 1\n',
            only="variable-naming",
        )

        assert results == []


def describe_role_naming() -> None:

    def flags_badly_named_roles(lint: Linter) -> None:
        results = lint(
            """
            - hosts: all
              roles:
                - MyRole
                - role: web-server
                - role: good_role
            """,
            only="role-naming",
        )

        assert [diag.message for diag in results] == [
            "Role name 'MyRole' should be lowercase with underscores",
            "Role name 'web-server' should be lowercase with underscores",
        ]

    def checks_included_roles(lint: Linter) -> None:
        results = lint(
            """
            - hosts: all
              tasks:
                - include_role:
                    name: BadRole
                - ansible.builtin.import_role:
                    name: good_role
            """,
            only="role-naming",
        )

        assert [diag.location.line for diag in results] == [4]

    @pytest.mark.parametrize(
        "name",
        [
            "community.general.my_role",
            "roles/Legacy-Role",
            '"{{ role_name }}"',
            "Inline_Role, port=80",
        ],
    )
    def skips_qualified_paths_templates_and_inline_roles(lint: Linter, name: str) -> None:
        results = lint(f"- hosts: all\n  roles:\n    - {name}\n", only="role-naming")

        assert results == []


def describe_file_extension() -> None:

    def accepts_yml_playbook(lint: Linter) -> None:
        assert lint("- hosts: all\n", only="file-extension") == []

    @pytest.mark.parametrize("path", ["site.yaml", "site.YML", "dir/site.Yaml"])
    def flags_other_playbook_extensions(lint: Linter, path: str) -> None:
        results = lint("- hosts: all\n", only="file-extension", path=path)

        assert len(results) == 1
        assert results[0].message.startswith("Use the .yml extension instead of")
        assert results[0].location.file == path

    def accepts_yaml_when_configured(lint: Linter) -> None:
        results = lint(
            "- hosts: all\n",
            only="file-extension",
            path="site.yaml",
            extensions="yml+yaml",
        )

        assert results == []

    def flags_referenced_files(lint: Linter) -> None:
        results = lint(
            """
            - include: other.yaml
            - hosts: all
              vars_files:
                - "vars/main.YML"
              tasks:
                - include_tasks: tasks.yml
                - include_tasks: "{{ env }}.yaml"
            """,
            only="file-extension",
        )

        assert [diag.location.line for diag in results] == [1, 4]

    def flags_vault_extension_on_plain_playbook(lint: Linter) -> None:
        results = lint("- hosts: all\n", only="file-extension", path="site.vault.yml")

        assert [diag.message for diag in results] == [
            "site.vault.yml is not vault-encrypted, do not use a vault extension"
        ]

    def flags_vault_extension_on_plain_reference(lint: Linter, tmp_path: Path) -> None:
        (tmp_path / "plain.vault.yml").write_text("---\nkey: value\n")
        (tmp_path / "secret.vault.yml").write_text(VAULT_TEXT)

        results = lint(
            """
            - hosts: all
              tasks:
                - include_vars: plain.vault.yml
                - include_vars: secret.vault.yml
                - include_vars: unknown.vault.yml
            """,
            only="file-extension",
            base_dir=tmp_path,
        )

        assert [diag.location.line for diag in results] == [3]


def describe_vault_extension() -> None:

    def flags_encrypted_playbook_without_vault_extension(lint: Linter) -> None:
        results = lint(VAULT_TEXT, only="vault-extension", path="secrets.yml")

        assert [diag.message for diag in results] == [
            "secrets.yml is vault-encrypted, use the .vault.yml extension"
        ]

    def accepts_encrypted_playbook_with_vault_extension(lint: Linter) -> None:
        assert lint(VAULT_TEXT, path="secrets.vault.yml") == []

    def flags_wrongly_cased_vault_extension(lint: Linter) -> None:
        results = lint(VAULT_TEXT, only="vault-extension", path="secrets.VAULT.yml")

        assert [diag.message for diag in results] == [
            "Use the lowercase .vault.yml extension for secrets.VAULT.yml"
        ]

    def accepts_yaml_vault_extension_when_configured(lint: Linter) -> None:
        results = lint(
            VAULT_TEXT,
            only="vault-extension",
            path="secrets.vault.yaml",
            extensions="yml+yaml",
        )

        assert results == []

    def flags_encrypted_reference(lint: Linter, tmp_path: Path) -> None:
        (tmp_path / "secrets.yml").write_text(VAULT_TEXT)
        (tmp_path / "plain.yml").write_text("---\nkey: value\n")

        results = lint(
            """
            - hosts: all
              vars_files:
                - "secrets.yml"
                - "plain.yml"
            """,
            only="vault-extension",
            base_dir=tmp_path,
        )

        assert [diag.message for diag in results] == [
            "secrets.yml is vault-encrypted, use the .vault.yml extension"
        ]
        assert results[0].location.line == 3
