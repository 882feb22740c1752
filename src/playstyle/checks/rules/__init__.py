from __future__ import annotations

from ..base import Rule
from .boolean_literal import BooleanLiteralRule
from .document_start import DocumentStartRule
from .end_of_file import EndOfFileRule
from .file_extension import FileExtensionRule
from .host_block_order import HostBlockOrderRule
from .include_quoting import IncludeQuotingRule
from .include_spacing import IncludeSpacingRule
from .indentation import IndentationRule
from .jinja_spacing import JinjaSpacingRule
from .key_spacing import KeySpacingRule
from .map_syntax import MapSyntaxRule
from .multiline_array import MultilineArrayRule
from .quote_style import QuoteStyleRule
from .role_naming import RoleNamingRule
from .sudo_become import SudoBecomeRule
from .task_field_order import TaskFieldOrderRule
from .variable_naming import VariableNamingRule
from .vault_extension import VaultExtensionRule


def get_all_rules() -> list[Rule]:
    return [
        QuoteStyleRule(),
        BooleanLiteralRule(),
        KeySpacingRule(),
        MapSyntaxRule(),
        SudoBecomeRule(),
        HostBlockOrderRule(),
        TaskFieldOrderRule(),
        IncludeQuotingRule(),
        IncludeSpacingRule(),
        VariableNamingRule(),
        JinjaSpacingRule(),
        FileExtensionRule(),
        VaultExtensionRule(),
        RoleNamingRule(),
        IndentationRule(),
        MultilineArrayRule(),
        DocumentStartRule(),
        EndOfFileRule(),
    ]
