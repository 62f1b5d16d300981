"""Report generation use case."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from browser_e2e_harness.artifact_storage import (
    MANIFEST_FILENAME,
    ArtifactManifest,
    ArtifactRecord,
    ScreenshotStore,
)

from .artifact_grouping import ReportStatistics, ScenarioGroup, compute_statistics, group_artifacts
from .html_report_writer import DEFAULT_REPORT_TITLE, render_report_html
from .scenario_catalog import DEFAULT_SCENARIOS, ScenarioDefinition

REPORT_FILENAME = "test-report-with-screenshots.html"

_LOGGER = logging.getLogger(__name__)


class ReportGenerationError(Exception):
    """Raised when the report cannot be produced."""


@dataclass(frozen=True)
class ReportOutcome:
    """Result of one report generation."""

    report_path: Path
    groups: tuple[ScenarioGroup, ...]
    statistics: ReportStatistics
    pruned: int


class ReportGenerator:
    """Builds the HTML report from the contents of a screenshot directory.

    When a store is given, artifacts of other runs are pruned before the
    first report of the process is written: the guard is the report file
    itself, so once it exists later generations keep every screenshot.
    """

    def __init__(
        self,
        store: ScreenshotStore | None = None,
        *,
        scenarios: Sequence[ScenarioDefinition] = DEFAULT_SCENARIOS,
        title: str = DEFAULT_REPORT_TITLE,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._scenarios = tuple(scenarios)
        self._title = title
        self._clock = clock or datetime.now

    def should_prune(self, report_path: Path | str) -> bool:
        return self._store is not None and not Path(report_path).exists()

    def generate(
        self, artifact_directory: Path | str, report_path: Path | str, *, prune: bool = True
    ) -> ReportOutcome | None:
        """Write the report; failures are logged and leave any earlier report untouched."""
        try:
            return self.generate_or_raise(artifact_directory, report_path, prune=prune)
        except ReportGenerationError:
            _LOGGER.error("Failed to generate report %s", report_path, exc_info=True)
            return None

    def generate_or_raise(
        self, artifact_directory: Path | str, report_path: Path | str, *, prune: bool = True
    ) -> ReportOutcome:
        directory = Path(artifact_directory)
        destination = Path(report_path)
        try:
            pruned = 0
            if prune and self._store is not None and self.should_prune(destination):
                pruned = self._store.prune_stale_runs(directory)
            groups = self.collect_groups(directory)
            statistics = compute_statistics(groups)
            document = render_report_html(
                groups, statistics, generated_at=self._clock(), title=self._title
            )
            _write_atomically(destination, document)
        except OSError as exc:
            raise ReportGenerationError(f"Failed to generate report {destination}: {exc}") from exc
        _LOGGER.info("HTML report with screenshots generated: %s", destination)
        return ReportOutcome(
            report_path=destination,
            groups=tuple(groups),
            statistics=statistics,
            pruned=pruned,
        )

    def collect_groups(self, artifact_directory: Path | str) -> list[ScenarioGroup]:
        directory = Path(artifact_directory)
        if not directory.is_dir():
            return []
        paths = sorted(path for path in directory.glob("*.png") if path.is_file())
        records: dict[str, ArtifactRecord] = {}
        if (directory / MANIFEST_FILENAME).exists():
            records = ArtifactManifest(directory).read()
        return group_artifacts(paths, self._scenarios, records)


def _write_atomically(destination: Path, document: str) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    handle, temp_name = tempfile.mkstemp(
        prefix=f".{destination.name}.", suffix=".tmp", dir=destination.parent
    )
    temp_path = Path(temp_name)
    try:
        with os.fdopen(handle, "w", encoding="utf-8") as stream:
            stream.write(document)
        temp_path.replace(destination)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
