"""Common types."""

from __future__ import annotations

import datetime
from enum import Enum

#: Scalar values, as resolved by the YAML loader.
type ScalarValue = str | int | bool | float | datetime.date | datetime.datetime | None


class Severity(Enum):
    """Severity of a diagnostic."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANKS[self]

    def __str__(self) -> str:
        return self.value


_SEVERITY_RANKS = {Severity.INFO: 0, Severity.WARNING: 1, Severity.ERROR: 2}
