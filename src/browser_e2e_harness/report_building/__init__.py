"""Report building exports."""

from .artifact_grouping import (
    ReportArtifact,
    ReportStatistics,
    ScenarioGroup,
    compute_statistics,
    group_artifacts,
)
from .failure_context import decode_failure_context
from .html_report_writer import DEFAULT_REPORT_TITLE, render_report_html
from .report_generation import (
    REPORT_FILENAME,
    ReportGenerationError,
    ReportGenerator,
    ReportOutcome,
)
from .scenario_catalog import (
    DEFAULT_SCENARIOS,
    UNKNOWN_SCENARIO_TITLE,
    ScenarioDefinition,
    normalize_step_label,
)

__all__ = [
    "ReportArtifact",
    "ReportStatistics",
    "ScenarioGroup",
    "compute_statistics",
    "group_artifacts",
    "decode_failure_context",
    "DEFAULT_REPORT_TITLE",
    "render_report_html",
    "REPORT_FILENAME",
    "ReportGenerationError",
    "ReportGenerator",
    "ReportOutcome",
    "DEFAULT_SCENARIOS",
    "UNKNOWN_SCENARIO_TITLE",
    "ScenarioDefinition",
    "normalize_step_label",
]
