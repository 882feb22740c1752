from __future__ import annotations

from typing import TextIO

import sys
from collections.abc import Sequence
from pathlib import Path

import click
import rich.console
import rich.table
from loguru import logger

from playstyle.checks import JsonReporter, RuleRegistry, TerminalReporter, lint_paths
from playstyle.config import LintConfig, find_config_file, load_config
from playstyle.errors import ConfigError
from playstyle.utils.discovery import expand_paths

#: Exit code for invalid configurations and files that cannot be checked.
EXIT_FATAL = 2


def _parse_severities(
    ctx: click.Context, param: click.Parameter, values: Sequence[str]
) -> dict[str, str]:
    severities: dict[str, str] = {}
    for value in values:
        rule_id, sep, level = value.partition("=")
        if not sep or not rule_id or not level:
            raise click.BadParameter(f"expected ID=LEVEL, got {value!r}")
        severities[rule_id.strip()] = level.strip()
    return severities


@click.group
@click.option("-v", "--verbose", is_flag=True, default=False, help="Print debug output")
@click.option(
    "-q", "--quiet", is_flag=True, default=False, help="Print only warnings and errors"
)
def cli(verbose: bool, quiet: bool) -> None:
    """Style checker for Ansible playbooks."""
    if verbose and quiet:
        raise click.BadOptionUsage(
            "verbose", "--verbose and --quiet are mutually exclusive"
        )
    # Set up logging
    logger.remove()
    desired_level = "DEBUG" if verbose else "WARNING" if quiet else "INFO"
    logger.add(sys.stderr, level=desired_level)


@cli.command
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text)",
)
@click.option(
    "-o",
    "--output",
    type=click.File(mode="wt"),
    default="-",
    help="File to write output to, defaults to stdout",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file (default: .playstyle.yml in the working directory, if present)",
)
@click.option(
    "--enable",
    multiple=True,
    help="Only check this rule. Can be given multiple times.",
)
@click.option(
    "--disable",
    multiple=True,
    help="Do not check this rule. Can be given multiple times.",
)
@click.option(
    "--severity",
    multiple=True,
    callback=_parse_severities,
    metavar="ID=LEVEL",
    help="Override the severity of a rule (error, warning or info). Can be given multiple times.",
)
@click.option(
    "--extensions",
    type=click.Choice(["yml-only", "yml+yaml"]),
    help="Accepted YAML file extensions (default: yml-only)",
)
@click.option(
    "--fail-on",
    type=click.Choice(["error", "warning", "none"]),
    help="Lowest severity that makes the check fail (default: error)",
)
@click.option(
    "-j",
    "--jobs",
    type=click.IntRange(min=1),
    default=1,
    help="Number of files to check concurrently (default: 1)",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    help="Time budget for checking a single file, in seconds (default: unlimited)",
)
def check(
    paths: Sequence[Path],
    output_format: str,
    output: TextIO,
    config_path: Path | None,
    enable: Sequence[str],
    disable: Sequence[str],
    severity: dict[str, str],
    extensions: str | None,
    fail_on: str | None,
    jobs: int,
    timeout: float | None,
) -> None:
    """Check the playbooks at PATHS for style violations.

    PATHS can be files, directories, which are searched recursively for
    playbooks, or glob patterns.
    """
    registry = RuleRegistry.default()
    try:
        config = _load_configuration(config_path).merged(
            enable=enable or None,
            disable=disable or None,
            severity=severity or None,
            extensions=extensions,
            fail_on=fail_on,
            timeout=timeout,
        )
        config.validate_rule_ids(registry.ids())
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_FATAL)

    files = expand_paths(paths)
    report = lint_paths(files, config, registry, jobs=jobs)

    reporter = JsonReporter(output) if output_format == "json" else TerminalReporter(output)
    reporter.report_results(report.diagnostics)
    sys.exit(report.exit_code(config.fail_on))


def _load_configuration(config_path: Path | None) -> LintConfig:
    if config_path is None:
        config_path = find_config_file(Path.cwd())
    if config_path is None:
        return LintConfig()
    return load_config(config_path)


@cli.command
def rules() -> None:
    """List the available rules and their default severities."""
    table = rich.table.Table("Rule", "Severity", "Description", box=None)
    for rule in RuleRegistry.default():
        table.add_row(rule.id, str(rule.severity), rule.description)
    rich.console.Console(width=999).print(table)


if __name__ == "__main__":
    cli()
