"""Miscellaneous utilities."""

from __future__ import annotations

from typing import TypeVar

from collections.abc import Iterable

_T = TypeVar("_T")


def first(it: Iterable[_T]) -> _T | None:
    """Get the first element of an arbitrary iterable, or None."""
    return next(iter(it), None)


def first_unsorted(keys: Iterable[str]) -> tuple[str, str] | None:
    """Get the first adjacent pair of keys that is out of alphabetical order, or None."""
    key_list = list(keys)
    return first((a, b) for a, b in zip(key_list, key_list[1:]) if a > b)
