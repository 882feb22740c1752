"""Structural style model for playbooks.

The model mirrors the layout of a playbook file rather than its meaning:
every node keeps its position and the formatting details that the style
rules inspect, such as the quoting of scalars and the spacing around colons.
"""
from __future__ import annotations

from typing import ClassVar, Union

import re
from collections.abc import Iterator, Sequence
from enum import Enum

from attrs import field, frozen

from playstyle.types import ScalarValue


class NodeKind(Enum):
    """Kinds of nodes that rules can be dispatched on."""

    DOCUMENT = "document"
    HOST_BLOCK = "host-block"
    INCLUDE = "include"
    TASK = "task"
    TASK_BLOCK = "task-block"
    ROLE = "role"
    MODULE = "module"
    ENTRY = "entry"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    SCALAR = "scalar"


class QuoteStyle(Enum):
    """How a scalar was written in the source."""

    UNQUOTED = "unquoted"
    DOUBLE = "double"
    SINGLE = "single"
    FOLDED = "folded-scalar"
    LITERAL = "literal-scalar"

    @classmethod
    def from_yaml_style(cls, style: str | None) -> QuoteStyle:
        return _YAML_STYLES.get(style, cls.UNQUOTED)

    @property
    def is_quoted(self) -> bool:
        return self is not QuoteStyle.UNQUOTED


_YAML_STYLES = {
    '"': QuoteStyle.DOUBLE,
    "'": QuoteStyle.SINGLE,
    ">": QuoteStyle.FOLDED,
    "|": QuoteStyle.LITERAL,
}


class ValueKind(Enum):
    """Inferred kind of a scalar's value."""

    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    NULL = "null"
    VARIABLE = "variable-reference"
    CONDITIONAL = "conditional-expression"


class ScalarContext(Enum):
    """The role a scalar plays in the playbook."""

    #: A mapping key.
    KEY = "key"
    #: The name of a variable being defined or registered.
    VARIABLE_NAME = "variable-name"
    #: An argument passed to a module.
    MODULE_PARAMETER = "module-parameter"
    #: The value of a variable definition.
    VARIABLE_VALUE = "variable-value"
    #: The value of a play, block or task keyword.
    OPTION_VALUE = "option-value"
    #: An identifier such as a host pattern, a task name or a role name.
    DIRECTIVE = "directive"
    #: A conditional expression, e.g. the value of `when`.
    CONDITIONAL = "conditional"
    #: The file named by an include statement.
    FILENAME = "filename"


class RoleStyle(Enum):
    """How a role entry was written."""

    MAPPING = "mapping"
    FLOW = "flow"
    STRING = "string"
    INLINE = "inline"


@frozen(order=True)
class Position:
    """1-based line and column in a source file."""

    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


_TEMPLATE_RE = re.compile(r"{{|{%")


def is_template(text: str) -> bool:
    return _TEMPLATE_RE.search(text) is not None


class StyleNode:
    """Base class of all model nodes."""

    node_kind: ClassVar[NodeKind]
    position: Position

    def children(self) -> Sequence[StyleNode]:
        return ()

    def walk(self) -> Iterator[StyleNode]:
        """Iterate over this node and all of its descendants, depth-first."""
        yield self
        for child in self.children():
            yield from child.walk()


@frozen
class Scalar(StyleNode):
    """A scalar value."""

    node_kind: ClassVar[NodeKind] = NodeKind.SCALAR

    position: Position
    #: Value as resolved by the YAML loader.
    value: ScalarValue
    #: Text content of the scalar, without quotes or escapes.
    text: str
    #: Token as it appears in the source, including quotes.
    raw: str
    quote_style: QuoteStyle
    kind: ValueKind
    context: ScalarContext
    #: Whether the scalar names a YAML file.
    is_reference: bool = False


@frozen
class KeyValue(StyleNode):
    """A key-value pair in a mapping, with the spacing around its colon."""

    node_kind: ClassVar[NodeKind] = NodeKind.ENTRY

    position: Position
    key: Scalar
    value: Node
    #: Spaces between the key and the colon, None if no colon could be located.
    spaces_before_colon: int | None = None
    #: Spaces between the colon and a value on the same line, None otherwise.
    spaces_after_colon: int | None = None
    #: Comment following the value on the key's line, without the `#`.
    trailing_comment: str | None = None

    @property
    def name(self) -> str:
        return self.key.text

    def children(self) -> Sequence[StyleNode]:
        return (self.value,)


_TASK_STRUCTURE_KEYS = frozenset(
    {"name", "vars", "args", "loop", "loop_control", "block", "rescue", "always"}
)
_PLAY_STRUCTURE_KEYS = frozenset(
    {"hosts", "name", "pre_tasks", "roles", "tasks", "post_tasks", "handlers"}
)


def _find_entry(entries: Sequence[KeyValue], *names: str) -> KeyValue | None:
    return next((entry for entry in entries if entry.name in names), None)


@frozen
class MappingNode(StyleNode):
    """A generic mapping."""

    node_kind: ClassVar[NodeKind] = NodeKind.MAPPING

    position: Position
    entries: tuple[KeyValue, ...] = ()
    #: Whether the mapping was written inline with braces.
    flow: bool = False

    def get(self, key: str) -> KeyValue | None:
        return _find_entry(self.entries, key)

    def keys(self) -> list[str]:
        return [entry.name for entry in self.entries]

    def children(self) -> Sequence[StyleNode]:
        return self.entries


@frozen
class SequenceNode(StyleNode):
    """A generic sequence."""

    node_kind: ClassVar[NodeKind] = NodeKind.SEQUENCE

    position: Position
    items: tuple[Node, ...] = ()
    #: Whether the sequence was written inline with brackets.
    flow: bool = False

    def children(self) -> Sequence[StyleNode]:
        return self.items


@frozen
class ModuleInvocation(StyleNode):
    """The module a task invokes, together with its arguments."""

    node_kind: ClassVar[NodeKind] = NodeKind.MODULE

    position: Position
    #: Module name, e.g. `file` or `ansible.builtin.copy`.
    name: str
    #: The task field carrying the module and its arguments.
    entry: KeyValue
    #: The `args` field of the task, if any.
    extra_args: KeyValue | None = None
    #: Whether the module accepts a free-form string argument.
    free_form: bool = False

    @property
    def args(self) -> Node:
        return self.entry.value

    @property
    def is_action_directive(self) -> bool:
        """Whether the module was given through `action` or `local_action`."""
        return self.entry.name in ("action", "local_action")

    def children(self) -> Sequence[StyleNode]:
        return (self.entry,)


@frozen
class Task(StyleNode):
    """A single task."""

    node_kind: ClassVar[NodeKind] = NodeKind.TASK

    position: Position
    #: All fields of the task, in source order.
    fields: tuple[KeyValue, ...] = ()
    module: ModuleInvocation | None = None

    @property
    def name(self) -> Scalar | None:
        entry = _find_entry(self.fields, "name")
        if entry is not None and isinstance(entry.value, Scalar):
            return entry.value
        return None

    @property
    def vars(self) -> KeyValue | None:
        return _find_entry(self.fields, "vars")

    @property
    def loop(self) -> KeyValue | None:
        return next(
            (
                entry
                for entry in self.fields
                if entry.name == "loop" or entry.name.startswith("with_")
            ),
            None,
        )

    @property
    def options(self) -> tuple[KeyValue, ...]:
        """Task keywords other than name, vars, args and the loop fields."""
        module_entry = self.module.entry if self.module is not None else None
        return tuple(
            entry
            for entry in self.fields
            if entry is not module_entry
            and entry.name not in _TASK_STRUCTURE_KEYS
            and not entry.name.startswith("with_")
        )

    def children(self) -> Sequence[StyleNode]:
        if self.module is None:
            return self.fields
        return tuple(
            self.module if entry is self.module.entry else entry
            for entry in self.fields
        )


@frozen
class TaskBlock(StyleNode):
    """A `block` grouping tasks, with optional `rescue` and `always` sections."""

    node_kind: ClassVar[NodeKind] = NodeKind.TASK_BLOCK

    position: Position
    fields: tuple[KeyValue, ...] = ()

    @property
    def name(self) -> Scalar | None:
        entry = _find_entry(self.fields, "name")
        if entry is not None and isinstance(entry.value, Scalar):
            return entry.value
        return None

    def section(self, name: str) -> KeyValue | None:
        return _find_entry(self.fields, name)

    @property
    def options(self) -> tuple[KeyValue, ...]:
        return tuple(
            entry for entry in self.fields if entry.name not in _TASK_STRUCTURE_KEYS
        )

    def children(self) -> Sequence[StyleNode]:
        return self.fields


@frozen
class RoleRef(StyleNode):
    """A role listed in the `roles` section of a play."""

    node_kind: ClassVar[NodeKind] = NodeKind.ROLE

    position: Position
    name: Scalar | None
    style: RoleStyle
    #: Fields of the role entry when written as a mapping.
    fields: tuple[KeyValue, ...] = ()
    #: False when the `roles` section is a bare mapping rather than a list.
    listed: bool = True

    @property
    def params(self) -> tuple[KeyValue, ...]:
        return tuple(entry for entry in self.fields if entry.name not in ("role", "name"))

    def children(self) -> Sequence[StyleNode]:
        if self.style in (RoleStyle.STRING, RoleStyle.INLINE) and self.name is not None:
            return (self.name,)
        return self.fields


@frozen
class HostBlock(StyleNode):
    """A play, i.e. a top-level mapping declaring `hosts`."""

    node_kind: ClassVar[NodeKind] = NodeKind.HOST_BLOCK

    position: Position
    fields: tuple[KeyValue, ...] = ()
    #: Number of blank lines directly preceding the block.
    blank_lines_before: int = 0

    @property
    def hosts(self) -> Scalar | None:
        entry = _find_entry(self.fields, "hosts")
        if entry is not None and isinstance(entry.value, Scalar):
            return entry.value
        return None

    def section(self, name: str) -> KeyValue | None:
        return _find_entry(self.fields, name)

    @property
    def options(self) -> tuple[KeyValue, ...]:
        """Play keywords other than the declaration and the task sections."""
        return tuple(
            entry for entry in self.fields if entry.name not in _PLAY_STRUCTURE_KEYS
        )

    def children(self) -> Sequence[StyleNode]:
        return self.fields


@frozen
class IncludeStatement(StyleNode):
    """A top-level `include` or `import_playbook` statement."""

    node_kind: ClassVar[NodeKind] = NodeKind.INCLUDE

    position: Position
    fields: tuple[KeyValue, ...] = ()
    #: Number of blank lines directly preceding the statement.
    blank_lines_before: int = 0

    @property
    def target(self) -> Scalar | None:
        entry = _find_entry(self.fields, "include", "import_playbook")
        if entry is not None and isinstance(entry.value, Scalar):
            return entry.value
        return None

    @property
    def vars(self) -> KeyValue | None:
        return _find_entry(self.fields, "vars")

    @property
    def tags(self) -> KeyValue | None:
        return _find_entry(self.fields, "tags")

    @property
    def multiline(self) -> bool:
        return len(self.fields) > 1

    def children(self) -> Sequence[StyleNode]:
        return self.fields


@frozen
class PlaybookDocument(StyleNode):
    """A whole playbook file."""

    node_kind: ClassVar[NodeKind] = NodeKind.DOCUMENT

    #: Path of the file, as given by the caller.
    path: str
    blocks: tuple[Block, ...] = ()
    position: Position = field(default=Position(1, 1))
    #: Whether the content starts with a `---` marker.
    explicit_start: bool = False
    #: Line of the `---` marker, or 1 if there is none.
    start_line: int = 1
    #: Whether comment lines precede the content.
    header_comment: bool = False
    #: Whether a blank line separates the header comments from `---`.
    blank_before_start: bool = False
    ends_with_newline: bool = True
    #: Number of blank lines after the last content line.
    trailing_blank_lines: int = 0
    #: Number of lines in the file.
    line_count: int = 0
    #: Whether the whole file is vault-encrypted, in which case it has no blocks.
    encrypted: bool = False

    def children(self) -> Sequence[StyleNode]:
        return self.blocks

    def references(self) -> list[Scalar]:
        """All scalars naming a YAML file."""
        return [
            node
            for node in self.walk()
            if isinstance(node, Scalar) and node.is_reference
        ]


Node = Union[Scalar, MappingNode, SequenceNode, Task, TaskBlock, RoleRef]
Block = Union[HostBlock, IncludeStatement]
