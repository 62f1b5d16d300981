"""Self-contained HTML rendering of grouped screenshots."""

from __future__ import annotations

import base64
import html
import logging
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from .artifact_grouping import ReportArtifact, ReportStatistics, ScenarioGroup

DEFAULT_REPORT_TITLE = "Selenium Test Execution Report"

_LOGGER = logging.getLogger(__name__)

_REPORT_STYLES = """
* { margin: 0; padding: 0; box-sizing: border-box; }
body {
  font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif;
  line-height: 1.6;
  color: #333;
  background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
  min-height: 100vh;
}
.header, .summary, .test-scenarios, .footer {
  background: rgba(255, 255, 255, 0.95);
  box-shadow: 0 4px 6px rgba(0, 0, 0, 0.1);
}
.header { padding: 2rem; text-align: center; margin-bottom: 2rem; }
.header h1 { color: #2c3e50; font-size: 2.5rem; margin-bottom: 0.5rem; }
.timestamp { color: #7f8c8d; font-size: 1.1rem; }
.status-badge {
  display: inline-block; margin-top: 1rem; padding: 0.5rem 1.5rem;
  border-radius: 25px; font-weight: bold; color: white;
}
.status-badge.success, .scenario-status.success, .step-status.success { background: #27ae60; }
.status-badge.failure, .scenario-status.failure, .step-status.failure { background: #e74c3c; }
.summary, .test-scenarios, .footer { margin: 0 2rem 2rem 2rem; padding: 2rem; border-radius: 10px; }
.summary h2, .test-scenarios h2 { color: #2c3e50; margin-bottom: 1.5rem; }
.stats { display: grid; grid-template-columns: repeat(4, 1fr); gap: 1rem; }
.stat { text-align: center; padding: 1rem; background: #f8f9fa; border-radius: 8px; }
.stat .number { display: block; font-size: 2rem; font-weight: bold; color: #3498db; }
.stat .label { color: #7f8c8d; font-size: 0.9rem; text-transform: uppercase; }
.scenario { margin-bottom: 2rem; border: 1px solid #e9ecef; border-radius: 8px; overflow: hidden; }
.scenario-header { background: #f8f9fa; padding: 1rem 1.5rem; border-bottom: 1px solid #e9ecef; }
.scenario-title-row { display: flex; justify-content: space-between; align-items: center; }
.scenario-status, .step-status {
  padding: 0.25rem 0.75rem; border-radius: 15px; color: white; font-size: 0.85rem;
}
.test-context { margin-top: 0.75rem; }
.test-info { display: flex; flex-wrap: wrap; gap: 1rem; color: #495057; font-size: 0.9rem; }
.scenario-steps { padding: 1.5rem; }
.step { margin-bottom: 1.5rem; border-left: 4px solid #27ae60; padding-left: 1rem; }
.step.failure-step { border-left-color: #e74c3c; }
.step-header {
  display: flex; justify-content: space-between; align-items: center; margin-bottom: 1rem;
}
.step-content { display: grid; grid-template-columns: 2fr 1fr; gap: 1.5rem; }
.screenshot { max-width: 100%; border: 1px solid #dee2e6; border-radius: 6px; }
.step-description {
  background: #f8f9fa; padding: 1rem; border-radius: 6px; border-left: 4px solid #3498db;
}
.step-description p { color: #495057; margin: 0; }
.footer { text-align: center; }
.footer p { color: #7f8c8d; margin: 0.5rem 0; }
@media (max-width: 768px) {
  .header h1 { font-size: 2rem; }
  .summary, .test-scenarios, .footer { margin: 0 1rem 1rem 1rem; }
  .stats { grid-template-columns: repeat(2, 1fr); }
  .step-content { grid-template-columns: 1fr; }
}
"""


def render_report_html(
    groups: Sequence[ScenarioGroup],
    statistics: ReportStatistics,
    *,
    generated_at: datetime,
    title: str = DEFAULT_REPORT_TITLE,
) -> str:
    """Render the complete report document; only ``generated_at`` varies between runs."""
    timestamp = generated_at.strftime("%Y-%m-%d %H:%M:%S")
    badge_class = "failure" if statistics.has_failures else "success"
    badge_text = "SOME TESTS FAILED" if statistics.has_failures else "ALL TESTS PASSED"
    scenarios = "".join(
        _render_scenario(number, group) for number, group in enumerate(groups, start=1)
    )
    if not groups:
        scenarios = '        <p class="empty">No screenshots were captured during this run.</p>\n'
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '    <meta charset="UTF-8">\n'
        '    <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f"    <title>{html.escape(title)}</title>\n"
        f"    <style>{_REPORT_STYLES}    </style>\n"
        "</head>\n"
        "<body>\n"
        '    <div class="header">\n'
        f"        <h1>{html.escape(title)}</h1>\n"
        f'        <p class="timestamp">Generated on: {timestamp}</p>\n'
        f'        <div class="status-badge {badge_class}">{badge_text}</div>\n'
        "    </div>\n"
        f"{_render_summary(statistics)}"
        '    <div class="test-scenarios">\n'
        "        <h2>Test Scenarios</h2>\n"
        f"{scenarios}"
        "    </div>\n"
        '    <div class="footer">\n'
        "        <p>Generated by browser-e2e-harness</p>\n"
        "        <p>Screenshots are embedded inline; this file can be archived on its own.</p>\n"
        "    </div>\n"
        "</body>\n"
        "</html>\n"
    )


def _render_summary(statistics: ReportStatistics) -> str:
    stats = (
        (statistics.total_tests, "Tests Run"),
        (statistics.failures, "Failures"),
        (statistics.errors, "Errors"),
        (statistics.screenshots, "Screenshots"),
    )
    cells = "".join(
        f'            <div class="stat"><span class="number">{value}</span>'
        f'<span class="label">{label}</span></div>\n'
        for value, label in stats
    )
    return (
        '    <div class="summary">\n'
        "        <h2>Test Summary</h2>\n"
        '        <div class="stats">\n'
        f"{cells}"
        "        </div>\n"
        "    </div>\n"
    )


def _render_scenario(number: int, group: ScenarioGroup) -> str:
    status_class, status_text = _status(group.has_failures)
    context_html = ""
    context = group.failure_context
    if context is not None:
        context_html = (
            '                <div class="test-context">\n'
            '                    <div class="test-info">\n'
            '                        <span class="test-class">Test Class: '
            f"<strong>{html.escape(context.test_class)}</strong></span>\n"
            '                        <span class="test-method">Test Method: '
            f"<strong>{html.escape(context.test_method)}()</strong></span>\n"
            '                        <span class="exception-type">Exception: '
            f"<strong>{html.escape(context.fault_kind)}</strong></span>\n"
            "                    </div>\n"
            "                </div>\n"
        )
    steps = "".join(
        _render_step(index, artifact) for index, artifact in enumerate(group.artifacts, start=1)
    )
    return (
        '        <div class="scenario">\n'
        '            <div class="scenario-header">\n'
        '                <div class="scenario-title-row">\n'
        f"                    <h3>Scenario {number}: {html.escape(group.title)}</h3>\n"
        f'                    <span class="scenario-status {status_class}">{status_text}</span>\n'
        "                </div>\n"
        f"{context_html}"
        "            </div>\n"
        '            <div class="scenario-steps">\n'
        f"{steps}"
        "            </div>\n"
        "        </div>\n"
    )


def _render_step(index: int, artifact: ReportArtifact) -> str:
    step_number = f"{index:02d}"
    status_class, status_text = _status(artifact.is_failure)
    step_class = "step failure-step" if artifact.is_failure else "step"
    image_source = encode_image_data_uri(artifact.path)
    step_label = artifact.step_label.replace("_", " ") or "Unknown Step"
    return (
        f'                <div class="{step_class}">\n'
        '                    <div class="step-header">\n'
        f"                        <h4>Step {step_number}: {html.escape(step_label)}</h4>\n"
        f'                        <span class="step-status {status_class}">{status_text}</span>\n'
        "                    </div>\n"
        '                    <div class="step-content">\n'
        '                        <div class="screenshot-container">\n'
        f'                            <img src="{image_source}" alt="Step {step_number} Screenshot"'
        ' class="screenshot">\n'
        "                        </div>\n"
        '                        <div class="step-description">\n'
        f"                            <p>{html.escape(artifact.description)}</p>\n"
        "                        </div>\n"
        "                    </div>\n"
        "                </div>\n"
    )


def encode_image_data_uri(path: Path) -> str:
    """Inline a PNG as a base64 data URI; unreadable files render as an empty image."""
    try:
        payload = base64.b64encode(path.read_bytes()).decode("ascii")
    except OSError:
        _LOGGER.warning("Failed to encode image %s", path, exc_info=True)
        payload = ""
    return f"data:image/png;base64,{payload}"


def _status(failed: bool) -> tuple[str, str]:
    return ("failure", "FAILED") if failed else ("success", "PASSED")
