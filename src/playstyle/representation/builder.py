"""Build the structural style model from a composed YAML node tree."""
from __future__ import annotations

from typing import Callable

import re

import yaml
from loguru import logger

from playstyle.errors import MalformedPlaybookError
from playstyle.utils import actions

from . import ansible_types as ans
from . import representation as rep
from .helpers import SourceText

_BOOL_TAG = "tag:yaml.org,2002:bool"
_NULL_TAG = "tag:yaml.org,2002:null"
_NUMBER_TAGS = ("tag:yaml.org,2002:int", "tag:yaml.org,2002:float")
_CANONICAL_INT_RE = re.compile(r"^[-+]?(0|[1-9][0-9]*)$")
_INLINE_ROLE_RE = re.compile(r"[\s=,]")

#: Builds the value of a key-value pair, given the key and the value node.
_ValueBuilder = Callable[[str, yaml.Node], rep.Node]


def build_document(
    root: yaml.Node | None, source: SourceText | str, path: str
) -> rep.PlaybookDocument:
    """
    Build the style model of a playbook from its composed YAML node tree.

    :param      root:    The composed root node, None for an empty file.
    :param      source:  The text the node tree was composed from.
    :param      path:    Path of the file, used in the model and in errors.

    :raises     MalformedPlaybookError:  When the document does not have the
                                         shape of a playbook.
    """
    if not isinstance(source, SourceText):
        source = SourceText(source)
    return _DocumentBuilder(source, path).build(root)


def _position(node: yaml.Node) -> rep.Position:
    return rep.Position(node.start_mark.line + 1, node.start_mark.column + 1)


def _is_empty(node: yaml.Node) -> bool:
    return (
        isinstance(node, yaml.ScalarNode)
        and node.style is None
        and node.start_mark.index == node.end_mark.index
    )


def _directive_context(key: str) -> rep.ScalarContext:
    if key in ans.CONDITIONAL_DIRECTIVES:
        return rep.ScalarContext.CONDITIONAL
    if key in ans.IDENTIFIER_DIRECTIVES:
        return rep.ScalarContext.DIRECTIVE
    if key == "register":
        return rep.ScalarContext.VARIABLE_NAME
    return rep.ScalarContext.OPTION_VALUE


class _DocumentBuilder:
    """Stateful helper for a single document."""

    source: SourceText
    path: str

    def __init__(self, source: SourceText, path: str) -> None:
        self.source = source
        self.path = path
        # Only used to resolve scalar values, never to load the document.
        self._constructor = yaml.SafeLoader("")

    def _malformed(self, reason: str, node: yaml.Node | None = None) -> MalformedPlaybookError:
        if node is None:
            return MalformedPlaybookError(reason)
        pos = _position(node)
        return MalformedPlaybookError(reason, pos.line, pos.column)

    # Document level

    def build(self, root: yaml.Node | None) -> rep.PlaybookDocument:
        if root is None or _is_empty(root):
            raise self._malformed("the document is empty", root)
        if not isinstance(root, yaml.SequenceNode):
            raise self._malformed(
                "expected a list of plays or playbook includes at the top level", root
            )
        if not root.value:
            raise self._malformed("the document contains no plays", root)

        blocks = tuple(self._block(item) for item in root.value)

        explicit_start, start_line, header_comment, blank_before_start = (
            self.source.document_start()
        )
        ends_with_newline, trailing_blank_lines = self.source.end_of_file()
        logger.debug(f"Built style model for {self.path} with {len(blocks)} blocks")
        return rep.PlaybookDocument(
            path=self.path,
            blocks=blocks,
            position=_position(root),
            explicit_start=explicit_start,
            start_line=start_line,
            header_comment=header_comment,
            blank_before_start=blank_before_start,
            ends_with_newline=ends_with_newline,
            trailing_blank_lines=trailing_blank_lines,
            line_count=len(self.source.lines),
        )

    def _block(self, node: yaml.Node) -> rep.Block:
        if not isinstance(node, yaml.MappingNode):
            raise self._malformed("top-level entries must be mappings", node)

        keys = [key.value for key, _ in node.value if isinstance(key, yaml.ScalarNode)]
        blank_lines = self.source.blank_lines_before(node.start_mark.line)
        if "hosts" in keys:
            return rep.HostBlock(
                position=_position(node),
                fields=tuple(self._entries(node, self._play_field)),
                blank_lines_before=blank_lines,
            )
        if any(key in ans.PLAYBOOK_INCLUDE_KEYS for key in keys):
            return rep.IncludeStatement(
                position=_position(node),
                fields=tuple(self._entries(node, self._include_field)),
                blank_lines_before=blank_lines,
            )
        raise self._malformed(
            "top-level entries must declare hosts or include a playbook", node
        )

    def _play_field(self, key: str, node: yaml.Node) -> rep.Node:
        if key in ("pre_tasks", "tasks", "post_tasks", "handlers"):
            return self._task_list(node)
        if key == "roles":
            return self._roles(node)
        if key == "vars":
            return self._variables(node)
        if key == "vars_files":
            return self._generic(node, rep.ScalarContext.OPTION_VALUE, reference=True)
        return self._generic(node, _directive_context(key), key=key)

    def _include_field(self, key: str, node: yaml.Node) -> rep.Node:
        if key in ans.PLAYBOOK_INCLUDE_KEYS:
            return self._filename(node)
        if key == "vars":
            return self._variables(node)
        return self._generic(node, _directive_context(key), key=key)

    # Tasks

    def _task_list(self, node: yaml.Node) -> rep.Node:
        if not isinstance(node, yaml.SequenceNode):
            return self._generic(node, rep.ScalarContext.OPTION_VALUE)
        items = tuple(
            self._task(item)
            if isinstance(item, yaml.MappingNode)
            else self._generic(item, rep.ScalarContext.OPTION_VALUE)
            for item in node.value
        )
        return rep.SequenceNode(_position(node), items, node.flow_style is True)

    def _task(self, node: yaml.MappingNode) -> rep.Task | rep.TaskBlock:
        keys = [key.value for key, _ in node.value if isinstance(key, yaml.ScalarNode)]
        if any(key in ans.BLOCK_SECTIONS for key in keys):
            return rep.TaskBlock(
                position=_position(node),
                fields=tuple(self._entries(node, self._block_field)),
            )

        module_key = self._module_key(keys)
        module_name = ""
        fields: list[rep.KeyValue] = []
        module_entry: rep.KeyValue | None = None

        for key_node, value_node in node.value:
            key = str(key_node.value)
            if module_key is not None and key == module_key and module_entry is None:
                module_name = self._module_name(key, value_node)
                entry = self._entry(
                    key_node,
                    value_node,
                    rep.ScalarContext.KEY,
                    lambda k, v: self._module_args(module_name, k, v),
                )
                module_entry = entry
            else:
                entry = self._entry(
                    key_node, value_node, rep.ScalarContext.KEY, self._task_field
                )
            fields.append(entry)

        module = None
        if module_entry is not None:
            extra_args = next((entry for entry in fields if entry.name == "args"), None)
            module = rep.ModuleInvocation(
                position=module_entry.position,
                name=module_name,
                entry=module_entry,
                extra_args=extra_args,
                free_form=actions.is_free_form(module_name),
            )

        return rep.Task(position=_position(node), fields=tuple(fields), module=module)

    def _module_key(self, keys: list[str]) -> str | None:
        for key in keys:
            if key in ("action", "local_action"):
                return key
        for key in keys:
            if not ans.is_task_keyword(key):
                return key
        return None

    def _module_name(self, key: str, value: yaml.Node) -> str:
        if key not in ("action", "local_action"):
            return key
        if isinstance(value, yaml.ScalarNode):
            words = str(value.value).split()
            return words[0] if words else ""
        if isinstance(value, yaml.MappingNode):
            for k, v in value.value:
                if k.value == "module" and isinstance(v, yaml.ScalarNode):
                    return str(v.value)
        return ""

    def _task_field(self, key: str, node: yaml.Node) -> rep.Node:
        if key == "vars":
            return self._variables(node)
        if key == "args":
            return self._generic(node, rep.ScalarContext.MODULE_PARAMETER)
        if key == "loop_control":
            return self._loop_control(node)
        return self._generic(node, _directive_context(key), key=key)

    def _block_field(self, key: str, node: yaml.Node) -> rep.Node:
        if key in ans.BLOCK_SECTIONS:
            return self._task_list(node)
        return self._task_field(key, node)

    def _loop_control(self, node: yaml.Node) -> rep.Node:
        if not isinstance(node, yaml.MappingNode):
            return self._generic(node, rep.ScalarContext.OPTION_VALUE)

        def build_value(key: str, value: yaml.Node) -> rep.Node:
            if key in ("loop_var", "index_var"):
                return self._generic(value, rep.ScalarContext.VARIABLE_NAME)
            return self._generic(value, rep.ScalarContext.OPTION_VALUE)

        return self._mapping(node, rep.ScalarContext.KEY, build_value)

    def _module_args(self, module: str, key: str, node: yaml.Node) -> rep.Node:
        if key in ("action", "local_action") and isinstance(node, yaml.ScalarNode):
            return self._scalar(node, rep.ScalarContext.DIRECTIVE)

        if isinstance(node, yaml.ScalarNode):
            if actions.is_file_include(module):
                return self._filename(node)
            return self._scalar(node, rep.ScalarContext.MODULE_PARAMETER)

        if not isinstance(node, yaml.MappingNode):
            return self._generic(node, rep.ScalarContext.MODULE_PARAMETER)

        if actions.is_set_fact(module):
            return self._mapping(
                node,
                rep.ScalarContext.VARIABLE_NAME,
                lambda k, v: self._generic(v, rep.ScalarContext.MODULE_PARAMETER)
                if k == "cacheable"
                else self._generic(v, rep.ScalarContext.VARIABLE_VALUE),
                key_context_for=lambda k: rep.ScalarContext.KEY
                if k == "cacheable"
                else rep.ScalarContext.VARIABLE_NAME,
            )

        def build_arg(arg: str, value: yaml.Node) -> rep.Node:
            if arg == "that" and actions.is_assert(module):
                return self._generic(value, rep.ScalarContext.CONDITIONAL)
            if arg == "file" and actions.is_file_include(module):
                return self._generic(value, rep.ScalarContext.FILENAME, reference=True)
            if arg == "name" and actions.is_import_include_role(module):
                return self._generic(value, rep.ScalarContext.DIRECTIVE)
            if arg == "module" and key in ("action", "local_action"):
                return self._generic(value, rep.ScalarContext.DIRECTIVE)
            return self._generic(value, rep.ScalarContext.MODULE_PARAMETER)

        return self._mapping(node, rep.ScalarContext.KEY, build_arg)

    # Roles

    def _roles(self, node: yaml.Node) -> rep.Node:
        if isinstance(node, yaml.MappingNode):
            # A bare mapping describes a single role without being a list.
            return self._role(node, listed=False)
        if not isinstance(node, yaml.SequenceNode):
            return self._generic(node, rep.ScalarContext.DIRECTIVE)

        items = tuple(self._role(item, listed=True) for item in node.value)
        return rep.SequenceNode(_position(node), items, node.flow_style is True)

    def _role(self, node: yaml.Node, listed: bool) -> rep.Node:
        if isinstance(node, yaml.ScalarNode):
            name = self._scalar(node, rep.ScalarContext.DIRECTIVE)
            style = (
                rep.RoleStyle.INLINE
                if _INLINE_ROLE_RE.search(name.text.strip())
                else rep.RoleStyle.STRING
            )
            return rep.RoleRef(_position(node), name, style, listed=listed)

        if not isinstance(node, yaml.MappingNode):
            return self._generic(node, rep.ScalarContext.DIRECTIVE)

        fields = tuple(
            self._entries(node, self._role_field, key_context=self._role_key_context)
        )
        name_entry = next(
            (entry for entry in fields if entry.name in ans.ROLE_NAME_KEYS), None
        )
        name = (
            name_entry.value
            if name_entry is not None and isinstance(name_entry.value, rep.Scalar)
            else None
        )
        style = rep.RoleStyle.FLOW if node.flow_style else rep.RoleStyle.MAPPING
        return rep.RoleRef(_position(node), name, style, fields, listed=listed)

    def _role_key_context(self, key: str) -> rep.ScalarContext:
        if key in ans.ROLE_NAME_KEYS or ans.is_task_keyword(key):
            return rep.ScalarContext.KEY
        return rep.ScalarContext.VARIABLE_NAME

    def _role_field(self, key: str, node: yaml.Node) -> rep.Node:
        if key in ans.ROLE_NAME_KEYS:
            return self._generic(node, rep.ScalarContext.DIRECTIVE)
        if key == "vars":
            return self._variables(node)
        if ans.is_task_keyword(key):
            return self._generic(node, _directive_context(key), key=key)
        return self._generic(node, rep.ScalarContext.VARIABLE_VALUE)

    # Generic nodes

    def _variables(self, node: yaml.Node) -> rep.Node:
        if not isinstance(node, yaml.MappingNode):
            return self._generic(node, rep.ScalarContext.VARIABLE_VALUE)
        return self._mapping(
            node,
            rep.ScalarContext.VARIABLE_NAME,
            lambda _, v: self._generic(v, rep.ScalarContext.VARIABLE_VALUE),
        )

    def _filename(self, node: yaml.Node) -> rep.Node:
        if not isinstance(node, yaml.ScalarNode):
            return self._generic(node, rep.ScalarContext.FILENAME)
        text = str(node.value).strip()
        # Free-form includes may carry `key=value` arguments after the name.
        is_reference = bool(text) and len(text.split()) == 1
        return self._scalar(node, rep.ScalarContext.FILENAME, reference=is_reference)

    def _generic(
        self,
        node: yaml.Node,
        context: rep.ScalarContext,
        key: str | None = None,
        reference: bool = False,
    ) -> rep.Node:
        """Build a node whose scalars all share the same context."""
        if isinstance(node, yaml.ScalarNode):
            return self._scalar(node, context, key=key, reference=reference)
        if isinstance(node, yaml.SequenceNode):
            items = tuple(
                self._generic(item, context, key=key, reference=reference)
                for item in node.value
            )
            return rep.SequenceNode(_position(node), items, node.flow_style is True)
        if not isinstance(node, yaml.MappingNode):
            raise self._malformed(f"unexpected YAML node {type(node).__name__}", node)
        return self._mapping(
            node, rep.ScalarContext.KEY, lambda _, v: self._generic(v, context)
        )

    def _mapping(
        self,
        node: yaml.MappingNode,
        key_context: rep.ScalarContext,
        build_value: _ValueBuilder,
        key_context_for: Callable[[str], rep.ScalarContext] | None = None,
    ) -> rep.MappingNode:
        entries = tuple(
            self._entry(
                key_node,
                value_node,
                key_context_for(str(key_node.value)) if key_context_for else key_context,
                build_value,
            )
            for key_node, value_node in node.value
        )
        return rep.MappingNode(_position(node), entries, node.flow_style is True)

    def _entries(
        self,
        node: yaml.MappingNode,
        build_value: _ValueBuilder,
        key_context: Callable[[str], rep.ScalarContext] | None = None,
    ) -> list[rep.KeyValue]:
        return [
            self._entry(
                key_node,
                value_node,
                key_context(str(key_node.value)) if key_context else rep.ScalarContext.KEY,
                build_value,
            )
            for key_node, value_node in node.value
        ]

    def _entry(
        self,
        key_node: yaml.Node,
        value_node: yaml.Node,
        key_context: rep.ScalarContext,
        build_value: _ValueBuilder,
    ) -> rep.KeyValue:
        if not isinstance(key_node, yaml.ScalarNode):
            raise self._malformed("complex mapping keys are not supported", key_node)

        key = self._scalar(key_node, key_context)
        before, after, comment = self._colon_spacing(key_node, value_node)
        return rep.KeyValue(
            position=key.position,
            key=key,
            value=build_value(key.text, value_node),
            spaces_before_colon=before,
            spaces_after_colon=after,
            trailing_comment=comment,
        )

    def _colon_spacing(
        self, key_node: yaml.Node, value_node: yaml.Node
    ) -> tuple[int | None, int | None, str | None]:
        key_end = key_node.end_mark
        colon = self.source.colon_index(key_end.index)
        if colon is None:
            return None, None, None

        before = colon - key_end.index
        colon_column = key_end.column + before
        value_start = value_node.start_mark
        value_end = value_node.end_mark

        if _is_empty(value_node):
            return before, None, self.source.trailing_comment(key_end.line, colon_column + 1)
        if value_start.line > key_end.line:
            return before, None, self.source.trailing_comment(key_end.line, colon_column + 1)
        if value_start.index <= colon:
            # Aliases carry the marks of the anchored node.
            return before, None, None

        comment = None
        if value_end.line == key_end.line:
            comment = self.source.trailing_comment(value_end.line, value_end.column)
        return before, value_start.index - colon - 1, comment

    def _scalar(
        self,
        node: yaml.Node,
        context: rep.ScalarContext,
        key: str | None = None,
        reference: bool = False,
    ) -> rep.Scalar:
        if not isinstance(node, yaml.ScalarNode):
            raise self._malformed("expected a scalar", node)

        quote_style = rep.QuoteStyle.from_yaml_style(node.style)
        text = str(node.value)
        return rep.Scalar(
            position=_position(node),
            value=self._construct(node),
            text=text,
            raw=self.source.slice(node.start_mark.index, node.end_mark.index),
            quote_style=quote_style,
            kind=_infer_kind(node, quote_style, context, key),
            context=context,
            is_reference=reference and bool(text) and not _is_empty(node),
        )

    def _construct(self, node: yaml.ScalarNode) -> object:
        try:
            return self._constructor.construct_object(node)
        except (yaml.YAMLError, ValueError) as e:
            # Unknown tags such as !vault, or out-of-range timestamps.
            logger.debug(f"Keeping raw value of {node.tag} scalar in {self.path}: {e}")
            return node.value


def _infer_kind(
    node: yaml.ScalarNode,
    quote_style: rep.QuoteStyle,
    context: rep.ScalarContext,
    key: str | None,
) -> rep.ValueKind:
    if context is rep.ScalarContext.CONDITIONAL:
        return rep.ValueKind.CONDITIONAL
    if context is rep.ScalarContext.VARIABLE_NAME:
        return rep.ValueKind.VARIABLE

    text = str(node.value)
    boolean_directive = key in ans.BOOLEAN_DIRECTIVES
    if quote_style is rep.QuoteStyle.UNQUOTED:
        if node.tag == _BOOL_TAG:
            return rep.ValueKind.BOOLEAN
        if node.tag == _NULL_TAG:
            return rep.ValueKind.NULL
        if node.tag in _NUMBER_TAGS:
            if boolean_directive and text in ("0", "1"):
                return rep.ValueKind.BOOLEAN
            return rep.ValueKind.NUMBER
        if boolean_directive and text.lower() in ans.BOOLEAN_TOKENS:
            return rep.ValueKind.BOOLEAN
        return rep.ValueKind.STRING

    if quote_style in (rep.QuoteStyle.FOLDED, rep.QuoteStyle.LITERAL):
        return rep.ValueKind.STRING

    lowered = text.lower()
    if lowered in ans.YAML_BOOLEAN_WORDS or (
        boolean_directive and lowered in ans.BOOLEAN_TOKENS
    ):
        return rep.ValueKind.BOOLEAN
    if _CANONICAL_INT_RE.match(text):
        return rep.ValueKind.NUMBER
    return rep.ValueKind.STRING
