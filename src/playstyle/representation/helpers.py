"""Helpers for inspecting the source text of a playbook."""

from __future__ import annotations

import re
from pathlib import Path

from loguru import logger

from . import ansible_types as ans
from . import representation as rep

_LINE_BREAK_RE = re.compile(r"\r\n|[\r\n\x85\u2028\u2029]")
_LINE_BREAKS = ("\n", "\r", "\x85", "\u2028", "\u2029")


class SourceText:
    """
    Wraps the text of a playbook file to answer questions about formatting
    that the YAML node tree does not retain.

    Lines and columns are 0-based, like the marks produced by PyYAML.
    """

    #: The complete text.
    text: str
    #: The text split into lines, without line terminators.
    lines: list[str]

    def __init__(self, text: str) -> None:
        self.text = text
        self.lines = _LINE_BREAK_RE.split(text)

    def line(self, line0: int) -> str:
        if 0 <= line0 < len(self.lines):
            return self.lines[line0]
        return ""

    def is_blank(self, line0: int) -> bool:
        return not self.line(line0).strip()

    def is_comment(self, line0: int) -> bool:
        return self.line(line0).lstrip().startswith("#")

    def slice(self, start: int, end: int) -> str:
        return self.text[start:end]

    def blank_lines_before(self, line0: int) -> int:
        """
        Count the blank lines directly above the given line.

        Comment lines directly above the line are considered to belong to it,
        so counting starts above them.
        """
        current = line0 - 1
        while current >= 0 and self.is_comment(current):
            current -= 1

        count = 0
        while current >= 0 and self.is_blank(current):
            count += 1
            current -= 1
        return count

    def colon_index(self, start: int) -> int | None:
        """Find the index of the colon following a key that ends at `start`."""
        index = start
        while index < len(self.text) and self.text[index] in " \t":
            index += 1
        if index < len(self.text) and self.text[index] == ":":
            return index
        return None

    def trailing_comment(self, line0: int, after_column: int) -> str | None:
        """Get the comment at the end of a line, after the given column."""
        rest = self.line(line0)[after_column:]
        match = re.search(r"(?:^|\s)#\s?(.*)$", rest)
        if match is None:
            return None
        return match.group(1).rstrip()

    def document_start(self) -> tuple[bool, int, bool, bool]:
        """
        Inspect the lines preceding the content.

        Returns whether a `---` marker is present, the 1-based line of the
        marker (or of the first content line), whether comment lines precede
        it, and whether a blank line separates these comments from the marker.
        """
        header_comment = False
        blank_after_comment = False
        for line0, line in enumerate(self.lines):
            stripped = line.strip()
            if not stripped:
                if header_comment:
                    blank_after_comment = True
                continue
            if stripped.startswith("#"):
                header_comment = True
                blank_after_comment = False
                continue
            if stripped.startswith("%"):
                # Directives such as %YAML precede the marker.
                continue

            explicit = line == "---" or line.startswith(("--- ", "---\t"))
            return explicit, line0 + 1, header_comment, blank_after_comment

        return False, 1, header_comment, blank_after_comment

    def end_of_file(self) -> tuple[bool, int]:
        """
        Inspect the end of the file.

        Returns whether the file ends with a line break, and the number of
        blank lines following the last non-blank line.
        """
        if not self.text:
            return True, 0

        ends_with_newline = self.text.endswith(_LINE_BREAKS)
        # The last element of the split is the (empty) remainder after the
        # final line break.
        lines = self.lines[:-1] if ends_with_newline else self.lines
        trailing = 0
        for line in reversed(lines):
            if line.strip():
                break
            trailing += 1
        return ends_with_newline, trailing


def probe_vault_references(
    document: rep.PlaybookDocument, base_dir: Path | None
) -> dict[str, bool]:
    """
    Determine which files referenced by the document are vault-encrypted.

    Only references that resolve to existing files are probed. Templated
    references are skipped.
    """
    if base_dir is None:
        return {}

    results: dict[str, bool] = {}
    for reference in document.references():
        target = reference.text
        if target in results or rep.is_template(target):
            continue
        path = base_dir / target
        if not path.is_file():
            continue
        try:
            with path.open("r", encoding="utf-8", errors="replace") as f:
                first_line = f.readline()
        except OSError as e:
            logger.warning(f"Could not read referenced file {path}: {e}")
            continue

        results[target] = is_vault_text(first_line)

    return results


def is_vault_text(text: str) -> bool:
    """Check whether text is vault-encrypted, based on its header line."""
    first_line = text.lstrip().splitlines()[0] if text.strip() else ""
    try:
        return bool(ans.is_encrypted(first_line))
    except (UnicodeError, TypeError):
        return False
