"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys
from collections import Counter
from pathlib import Path

import click

from browser_e2e_harness.artifact_storage import ArtifactManifest, ScreenshotStore
from browser_e2e_harness.configuration import (
    DEFAULT_CONFIG_FILENAME,
    Configuration,
    ConfigurationError,
    default_configuration,
    load_configuration,
    write_placeholder_configuration,
)
from browser_e2e_harness.execution_identity import ExecutionIdentity, extract_execution_id
from browser_e2e_harness.report_building import ReportGenerationError, ReportGenerator

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="browser-e2e-harness")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity",
)
def cli(log_level: str) -> None:
    """Screenshot artifacts and HTML reports for browser E2E test runs."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML harness configuration to write",
)
def generate_config(output_path: str) -> None:
    """Generate a YAML harness configuration with defaults and guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="report")
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to the YAML harness configuration file",
)
@click.option(
    "--screenshot-dir",
    "screenshot_dir",
    required=False,
    type=click.Path(path_type=str),
    help="Directory holding the screenshots (overrides the configuration)",
)
@click.option(
    "--report-path",
    "report_path",
    required=False,
    type=click.Path(path_type=str),
    help="HTML report file to write (overrides the configuration)",
)
@click.option(
    "--execution-id",
    "execution_id",
    required=False,
    help="Keep only this run's screenshots before rendering",
)
@click.option("--title", required=False, help="Report title (overrides the configuration)")
def report(
    config_path: str | None,
    screenshot_dir: str | None,
    report_path: str | None,
    execution_id: str | None,
    title: str | None,
) -> None:
    """Render the HTML report from a screenshot directory."""
    configuration = _load_cli_configuration(config_path)
    directory = Path(screenshot_dir) if screenshot_dir else configuration.screenshots.directory
    destination = Path(report_path) if report_path else configuration.report.path
    store = _store_for(directory, execution_id) if execution_id else None
    generator = ReportGenerator(
        store,
        scenarios=configuration.report.scenarios,
        title=title or configuration.report.title,
    )
    try:
        if store is not None:
            pruned = store.prune_stale_runs(directory)
            click.echo(f"Removed {pruned} screenshot(s) from other runs", err=True)
        outcome = generator.generate_or_raise(directory, destination, prune=False)
    except ReportGenerationError as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(outcome.report_path.resolve()))


@cli.command(name="prune")
@click.option(
    "--screenshot-dir",
    "screenshot_dir",
    required=True,
    type=click.Path(path_type=str),
    help="Directory holding the screenshots",
)
@click.option("--execution-id", "execution_id", required=True, help="Run whose screenshots stay")
def prune(screenshot_dir: str, execution_id: str) -> None:
    """Delete screenshots that belong to any run other than the given one."""
    directory = Path(screenshot_dir)
    deleted = _store_for(directory, execution_id).prune_stale_runs(directory)
    click.echo(str(deleted))


@cli.command(name="list-runs")
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to the YAML harness configuration file",
)
@click.option(
    "--screenshot-dir",
    "screenshot_dir",
    required=False,
    type=click.Path(path_type=str),
    help="Directory holding the screenshots (overrides the configuration)",
)
def list_runs(config_path: str | None, screenshot_dir: str | None) -> None:
    """Show how many screenshots each execution ID has in the directory."""
    configuration = _load_cli_configuration(config_path)
    directory = Path(screenshot_dir) if screenshot_dir else configuration.screenshots.directory
    if not directory.is_dir():
        raise CliError(f"Screenshot directory not found: {directory}")
    counts = Counter(
        extract_execution_id(path.name) for path in sorted(directory.glob("*.png"))
    )
    for run_id, count in sorted(counts.items()):
        click.echo(f"{run_id}\t{count}")


def _load_cli_configuration(config_path: str | None) -> Configuration:
    try:
        if config_path:
            return load_configuration(config_path)
        return default_configuration()
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc


def _store_for(directory: Path, execution_id: str) -> ScreenshotStore:
    identity = ExecutionIdentity()
    try:
        identity.adopt(execution_id)
    except ValueError as exc:
        raise CliError(str(exc)) from exc
    return ScreenshotStore(directory, identity, manifest=ArtifactManifest(directory))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
