"""Loaders for playbook source text.

Playbooks are composed rather than constructed: the YAML node tree retains
the positions and scalar styles that style checks rely on, which the
constructed Python objects lose.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from loguru import logger

from playstyle.errors import ParseError


def load_source(text: str, path: Path | str) -> yaml.Node | None:
    """
    Compose the YAML node tree of a playbook.

    Returns None when the text contains no document at all.

    :raises     ParseError:  When the text is not valid YAML, or contains
                             multiple documents.
    """
    try:
        documents = list(yaml.compose_all(text, Loader=yaml.SafeLoader))
    except yaml.MarkedYAMLError as e:
        mark = e.problem_mark or e.context_mark
        line, column = (mark.line + 1, mark.column + 1) if mark else (1, 1)
        reason = e.problem or str(e)
        raise ParseError(path, reason, line, column) from e
    except yaml.YAMLError as e:
        raise ParseError(path, str(e)) from e

    if not documents:
        logger.debug(f"{path} contains no YAML document")
        return None

    if len(documents) > 1:
        second = documents[1]
        raise ParseError(
            path,
            f"expected a single document, found {len(documents)}",
            second.start_mark.line + 1,
            second.start_mark.column + 1,
        )

    return documents[0]


def read_source(path: Path) -> str:
    """
    Read the text of a file.

    :raises     OSError:  When the file cannot be read.
    :raises     UnicodeDecodeError:  When the file is not valid UTF-8.
    """
    with path.open("r", encoding="utf-8", newline="") as f:
        return f.read()
