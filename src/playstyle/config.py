"""Linter configuration."""

from __future__ import annotations

from typing import Any, Literal

from collections.abc import Iterable
from pathlib import Path

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator

from playstyle.errors import ConfigError
from playstyle.types import Severity

#: Name of the configuration file looked up in the working directory.
CONFIG_FILE_NAME = ".playstyle.yml"


class LintConfig(BaseModel, frozen=True, extra="forbid"):
    """
    Immutable configuration of a lint run.

    The configuration is passed explicitly to everything that needs it. Use
    :meth:`merged` to derive a configuration with overrides applied.
    """

    #: When non-empty, only these rules are evaluated.
    enable: frozenset[str] = frozenset()
    #: Rules that are never evaluated.
    disable: frozenset[str] = frozenset()
    #: Severity overrides, by rule identifier.
    severity: dict[str, Severity] = Field(default_factory=dict)
    #: Accepted YAML file extensions.
    extensions: Literal["yml-only", "yml+yaml"] = "yml-only"
    #: Lowest severity that makes the run fail.
    fail_on: Literal["error", "warning", "none"] = "error"
    #: Time budget for evaluating a single file, in seconds.
    timeout: float | None = Field(default=None, gt=0)

    @field_validator("severity", mode="before")
    @classmethod
    def _lowercase_severities(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {
                k: v.lower() if isinstance(v, str) else v for k, v in value.items()
            }
        return value

    def is_enabled(self, rule_id: str) -> bool:
        if rule_id in self.disable:
            return False
        return not self.enable or rule_id in self.enable

    def severity_for(self, rule_id: str, default: Severity) -> Severity:
        return self.severity.get(rule_id, default)

    def allowed_extensions(self) -> tuple[str, ...]:
        if self.extensions == "yml+yaml":
            return (".yml", ".yaml")
        return (".yml",)

    def vault_extensions(self) -> tuple[str, ...]:
        return tuple(f".vault{ext}" for ext in self.allowed_extensions())

    def validate_rule_ids(self, known: Iterable[str]) -> None:
        """
        Check that every rule referenced by the configuration exists.

        :raises     ConfigError:  When an unknown rule identifier is referenced.
        """
        known_ids = set(known)
        referenced = self.enable | self.disable | set(self.severity)
        unknown = sorted(referenced - known_ids)
        if unknown:
            raise ConfigError(f"Unknown rule identifiers: {', '.join(unknown)}")

    def merged(self, **overrides: Any) -> LintConfig:
        """
        Create a new configuration with the given overrides applied.

        None values are ignored. Rule sets are extended and severity overrides
        are updated, rather than replaced.

        :raises     ConfigError:  When the result is not a valid configuration.
        """
        data = self.model_dump()
        for key, value in overrides.items():
            if value is None:
                continue
            if key in ("enable", "disable"):
                data[key] = data[key] | frozenset(value)
            elif key == "severity":
                data[key] = {**data[key], **value}
            else:
                data[key] = value
        return _validate(data, "overrides")


def _validate(data: Any, origin: str) -> LintConfig:
    try:
        return LintConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {origin}:\n{e}") from e


def load_config(path: Path) -> LintConfig:
    """
    Load a configuration file.

    :raises     ConfigError:  When the file cannot be read or is invalid.
    """
    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot load configuration from {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid configuration in {path}: expected a mapping")

    logger.debug(f"Loaded configuration from {path}")
    return _validate(data, str(path))


def find_config_file(directory: Path) -> Path | None:
    """Find the configuration file in a directory, if present."""
    candidate = directory / CONFIG_FILE_NAME
    return candidate if candidate.is_file() else None
