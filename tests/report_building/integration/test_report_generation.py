"""Report generation integration tests."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest
from browser_e2e_harness.artifact_storage import (
    MANIFEST_FILENAME,
    ArtifactManifest,
    CapturePolicy,
    ScreenshotStore,
)
from browser_e2e_harness.execution_identity import ExecutionIdentity
from browser_e2e_harness.report_building import (
    REPORT_FILENAME,
    ReportGenerationError,
    ReportGenerator,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"
_STALE = "exec_20200101_000000_00000000_1"


class FakeScreenshotSource:
    def get_screenshot_as_png(self) -> bytes:
        return PNG_BYTES


def _fixed_clock() -> datetime:
    return datetime(2024, 3, 5, 15, 30, 0)


def _store(directory: Path) -> ScreenshotStore:
    return ScreenshotStore(
        directory,
        ExecutionIdentity(),
        policy=CapturePolicy.ALL_STEPS,
        manifest=ArtifactManifest(directory),
    )


def test_first_report_prunes_stale_runs_and_later_reports_keep_everything(
    tmp_path: Path,
) -> None:
    shots = tmp_path / "screenshots"
    shots.mkdir()
    stale = shots / f"step_01_Inventory_Flow_01_login_page_{_STALE}.png"
    stale.write_bytes(PNG_BYTES)
    store = _store(shots)
    store.capture(FakeScreenshotSource(), "Inventory_Flow_01_login_page")
    report_path = tmp_path / "reports" / REPORT_FILENAME
    generator = ReportGenerator(store, clock=_fixed_clock)

    first = generator.generate(shots, report_path)
    late_stale = shots / f"step_02_testAlerts_accept_{_STALE}.png"
    late_stale.write_bytes(PNG_BYTES)
    second = generator.generate(shots, report_path)

    assert first is not None and second is not None
    assert first.pruned == 1
    assert not stale.exists()
    assert second.pruned == 0
    assert late_stale.exists()
    assert second.statistics.screenshots == 2


def test_repeated_generation_is_idempotent(tmp_path: Path) -> None:
    shots = tmp_path / "screenshots"
    store = _store(shots)
    source = FakeScreenshotSource()
    store.capture(source, "testFormAutomation_01_fill")
    store.capture_failure(source, "testFormAutomation_02_submit")
    report_path = tmp_path / "reports" / REPORT_FILENAME
    generator = ReportGenerator(store, clock=_fixed_clock)

    generator.generate(shots, report_path)
    first = report_path.read_text(encoding="utf-8")
    generator.generate(shots, report_path)
    second = report_path.read_text(encoding="utf-8")

    assert first == second
    assert "Scenario 1: Form Automation Test" in first
    assert sorted(path.name for path in shots.glob("*.png")) == sorted(
        path.name for path in store.list_artifacts()
    )


def test_statistics_count_failures_and_errors(tmp_path: Path) -> None:
    shots = tmp_path / "screenshots"
    shots.mkdir()
    for name in (
        f"step_01_testFrames_switch_{_STALE}.png",
        f"step_02_FAILURE_FrameTest_testFrames_AssertionError_Failure_{_STALE}.png",
        f"step_03_FAILURE_AlertTest_testAlerts_TimeoutException_Failure_{_STALE}.png",
    ):
        (shots / name).write_bytes(PNG_BYTES)

    outcome = ReportGenerator(clock=_fixed_clock).generate(shots, tmp_path / "report.html")

    assert outcome is not None
    assert outcome.pruned == 0
    assert [group.title for group in outcome.groups] == [
        "iFrame Handling Test",
        "JavaScript Alerts Test",
    ]
    assert outcome.statistics.total_tests == 2
    assert outcome.statistics.failures == 2
    assert outcome.statistics.errors == 1
    assert outcome.statistics.screenshots == 3


def test_manifest_test_name_groups_labels_without_markers(tmp_path: Path) -> None:
    shots = tmp_path / "screenshots"
    store = _store(shots)
    store.capture(FakeScreenshotSource(), "01 open popup", test_name="testWindows")

    outcome = ReportGenerator(clock=_fixed_clock).generate(shots, tmp_path / "report.html")

    assert outcome is not None
    assert [group.title for group in outcome.groups] == ["Window Handling Test"]


def test_missing_directory_renders_empty_report(tmp_path: Path) -> None:
    report_path = tmp_path / "report.html"

    outcome = ReportGenerator(clock=_fixed_clock).generate(tmp_path / "absent", report_path)

    assert outcome is not None
    assert outcome.statistics.total_tests == 0
    assert "No screenshots were captured during this run." in report_path.read_text(
        encoding="utf-8"
    )


def test_write_failure_keeps_previous_report(tmp_path: Path, caplog) -> None:
    blocker = tmp_path / "reports"
    blocker.write_text("not a directory", encoding="utf-8")

    outcome = ReportGenerator(clock=_fixed_clock).generate(tmp_path, blocker / "report.html")

    assert outcome is None
    assert "Failed to generate report" in caplog.text
    assert blocker.read_text(encoding="utf-8") == "not a directory"


def test_generate_or_raise_wraps_io_errors(tmp_path: Path) -> None:
    blocker = tmp_path / "reports"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(ReportGenerationError):
        ReportGenerator().generate_or_raise(tmp_path, blocker / "report.html")


def test_undecodable_manifest_only_loses_enrichment(tmp_path: Path) -> None:
    store = _store(tmp_path)
    stale = tmp_path / f"step_01_testAlerts_accept_{_STALE}.png"
    stale.write_bytes(PNG_BYTES)
    store.capture(FakeScreenshotSource(), "testWindows_01_open")
    (tmp_path / MANIFEST_FILENAME).write_bytes(b"\xff\xfe garbage")
    report_path = tmp_path / "reports" / REPORT_FILENAME

    outcome = ReportGenerator(store, clock=_fixed_clock).generate(tmp_path, report_path)

    assert outcome is not None
    assert outcome.pruned == 1
    assert not stale.exists()
    assert [group.title for group in outcome.groups] == ["Window Handling Test"]
    assert report_path.exists()
