"""Utilities to find playbooks to check."""

from __future__ import annotations

import glob
import os
from collections.abc import Iterable, Iterator, Sequence
from contextlib import redirect_stderr
from pathlib import Path

from ansible.errors import AnsibleError
from ansible.parsing.dataloader import DataLoader
from loguru import logger

from playstyle.representation.ansible_types import YAML_EXTENSIONS

#: Top-level keys of which at least one must occur in a playbook.
_PLAYBOOK_MARKERS = ("hosts", "import_playbook", "include")

_GLOB_CHARACTERS = frozenset("*?[")


def is_playbook_candidate(path: Path) -> bool:
    """Check whether a file found while searching a directory is a playbook.

    Task files, variable files and other YAML in a project are rejected, so
    that they are not reported as malformed playbooks."""

    # Hidden files are unlikely to be playbooks.
    if path.name.startswith("."):
        return False

    # Extensions are matched case-insensitively so that wrongly cased ones can
    # be reported.
    if path.suffix.lower() not in YAML_EXTENSIONS:
        return False

    # Every play needs "hosts", and playbook includes need one of the include
    # keys. A file without any of these is definitely not a playbook.
    try:
        content = path.read_text(errors="ignore")
    except OSError as e:
        logger.warning(f"Could not read {path}: {e}")
        return False
    if not any(marker in content for marker in _PLAYBOOK_MARKERS):
        return False

    # Finally, parse the YAML and check the top-level structure.
    try:
        with open(os.devnull, "w") as devnull, redirect_stderr(devnull):
            yaml_obj = DataLoader().load(content)
    except AnsibleError:
        # Unparseable files are only reported when given explicitly.
        logger.debug(f"Skipping {path}: not valid YAML")
        return False

    return (
        isinstance(yaml_obj, list)
        and bool(yaml_obj)
        and all(isinstance(child, dict) for child in yaml_obj)
        and all(
            any(marker in child for marker in _PLAYBOOK_MARKERS) for child in yaml_obj
        )
    )


def find_playbooks(root: Path) -> list[Path]:
    """Recursively find all candidate playbooks in a directory, in sorted order."""
    return sorted(_find_playbooks(root))


def _find_playbooks(root: Path) -> Iterator[Path]:
    for child in root.iterdir():
        if child.name.startswith(".") or child.is_symlink():
            continue
        if child.is_dir():
            yield from _find_playbooks(child)
        elif child.is_file() and is_playbook_candidate(child):
            yield child


def expand_paths(paths: Sequence[str | Path]) -> list[Path]:
    """
    Expand files, directories and glob patterns into the files to check.

    Files given explicitly are always checked, even when they do not exist, so
    that they are reported as unreadable. Directories are searched recursively
    for playbooks. Each file is returned once, in the order it was found.
    """
    found: dict[Path, None] = {}
    for path in paths:
        for expanded in _expand(str(path)):
            found.setdefault(expanded, None)
    return list(found)


def _expand(pattern: str) -> Iterable[Path]:
    if _GLOB_CHARACTERS.intersection(pattern):
        matches = sorted(glob.glob(pattern, recursive=True))
        if not matches:
            logger.warning(f"Pattern {pattern} does not match any file")
        for match in matches:
            match_path = Path(match)
            if match_path.is_dir():
                yield from find_playbooks(match_path)
            else:
                yield match_path
        return

    path = Path(pattern)
    if path.is_dir():
        playbooks = find_playbooks(path)
        if not playbooks:
            logger.warning(f"No playbooks found in {path}")
        yield from playbooks
    else:
        yield path
