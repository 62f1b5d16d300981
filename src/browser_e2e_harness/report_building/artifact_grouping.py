"""Reconstruction of scenario and step structure from stored artifacts."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from browser_e2e_harness.artifact_storage import (
    UNKNOWN_CONTEXT_VALUE,
    ArtifactName,
    ArtifactRecord,
    FailureContext,
    parse_artifact_filename,
)

from .failure_context import resolve_failure_context
from .scenario_catalog import (
    UNKNOWN_SCENARIO_TITLE,
    ScenarioDefinition,
    describe_step,
    resolve_scenario,
)

_ASSERTION_FAULT_KINDS = frozenset({"AssertionError", "AssertionFailedError"})


@dataclass(frozen=True)
class ReportArtifact:
    """One screenshot as shown in the report."""

    path: Path
    name: ArtifactName
    record: ArtifactRecord | None
    step_label: str
    description: str
    failure_context: FailureContext

    @property
    def is_failure(self) -> bool:
        if self.record is not None:
            return self.record.failure or self.name.is_failure
        return self.name.is_failure

    @property
    def is_error(self) -> bool:
        kind = self.failure_context.fault_kind
        return (
            self.is_failure
            and kind != UNKNOWN_CONTEXT_VALUE
            and kind not in _ASSERTION_FAULT_KINDS
        )


@dataclass(frozen=True)
class ScenarioGroup:
    """Artifacts attributed to one scenario, in capture order."""

    title: str
    artifacts: tuple[ReportArtifact, ...]

    @property
    def has_failures(self) -> bool:
        return any(artifact.is_failure for artifact in self.artifacts)

    @property
    def failure_context(self) -> FailureContext | None:
        """First detailed failure context among the group's artifacts."""
        for artifact in self.artifacts:
            if artifact.is_failure and artifact.failure_context.is_detailed:
                return artifact.failure_context
        return None


@dataclass(frozen=True)
class ReportStatistics:
    """Aggregate counters rendered in the report summary."""

    total_tests: int
    failures: int
    errors: int
    screenshots: int

    @property
    def has_failures(self) -> bool:
        return self.failures > 0 or self.errors > 0


def group_artifacts(
    paths: Sequence[Path],
    scenarios: Sequence[ScenarioDefinition],
    records: Mapping[str, ArtifactRecord] | None = None,
) -> list[ScenarioGroup]:
    """Group screenshot files into scenarios.

    Files are ordered by step ordinal (then filename); groups appear in the
    order of their first artifact. Labels are matched against the scenario
    markers, falling back to the owning test name recorded in the manifest.
    """
    known_records = records or {}
    decoded = sorted(
        ((path, parse_artifact_filename(path.name)) for path in paths),
        key=lambda item: item[1].sort_key,
    )
    grouped: dict[str, list[ReportArtifact]] = {}
    for path, name in decoded:
        record = known_records.get(path.name)
        test_name = record.test_name if record is not None else None
        scenario = resolve_scenario([name.label, test_name or ""], scenarios)
        title = scenario.title if scenario is not None else UNKNOWN_SCENARIO_TITLE
        grouped.setdefault(title, []).append(
            ReportArtifact(
                path=path,
                name=name,
                record=record,
                step_label=name.label,
                description=describe_step(name.label, scenario),
                failure_context=resolve_failure_context(name.label, record),
            )
        )
    return [ScenarioGroup(title=title, artifacts=tuple(items)) for title, items in grouped.items()]


def compute_statistics(groups: Sequence[ScenarioGroup]) -> ReportStatistics:
    artifacts = [artifact for group in groups for artifact in group.artifacts]
    return ReportStatistics(
        total_tests=len(groups),
        failures=sum(1 for artifact in artifacts if artifact.is_failure),
        errors=sum(1 for artifact in artifacts if artifact.is_error),
        screenshots=len(artifacts),
    )
