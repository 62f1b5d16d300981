"""Result tracker tests."""

from __future__ import annotations

import contextvars
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime, timedelta

from browser_e2e_harness.result_tracking import ResultTracker


class SteppingClock:
    """Clock advancing 250 ms per reading."""

    def __init__(self) -> None:
        self._now = datetime(2024, 3, 5, 14, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        current = self._now
        self._now += timedelta(milliseconds=250)
        return current


def test_start_binds_current_test_and_end_unbinds() -> None:
    tracker = ResultTracker()

    snapshot = tracker.start_test("test_login")

    assert snapshot.test_name == "test_login"
    assert tracker.current_test_name() == "test_login"
    tracker.end_test("test_login")
    assert tracker.current_test_name() is None
    record = tracker.get_record("test_login")
    assert record is not None and record.end_time is not None


def test_failure_flag_is_sticky_and_keeps_latest_fault() -> None:
    tracker = ResultTracker()
    tracker.start_test("test_checkout")

    tracker.record_failure("test_checkout", "02_pay", TimeoutError("slow"))
    tracker.record_failure("test_checkout", "03_confirm", AssertionError("wrong total"))

    record = tracker.get_record("test_checkout")
    assert record is not None
    assert record.has_failures
    assert record.last_failure_step == "03_confirm"
    assert record.last_fault is not None
    assert record.last_fault.kind == "AssertionError"
    assert record.last_fault.message == "wrong total"
    assert tracker.has_current_failures()


def test_unknown_test_names_are_ignored() -> None:
    tracker = ResultTracker()

    tracker.record_failure("ghost", "step", RuntimeError("boom"))
    tracker.record_screenshot("ghost")
    tracker.end_test("ghost")

    assert tracker.get_record("ghost") is None
    assert tracker.records() == []
    assert not tracker.has_current_failures()


def test_restarting_a_name_replaces_its_record() -> None:
    tracker = ResultTracker()
    tracker.start_test("test_retry")
    tracker.record_failure("test_retry", "step", RuntimeError("first try"))

    tracker.start_test("test_retry")

    record = tracker.get_record("test_retry")
    assert record is not None and not record.has_failures


def test_concurrent_tests_keep_their_own_current_binding() -> None:
    tracker = ResultTracker()

    def run_test(index: int) -> tuple[str, str | None, int]:
        name = f"test_parallel_{index}"
        tracker.start_test(name)
        for _ in range(25):
            tracker.record_screenshot(name)
        if index % 2:
            tracker.record_failure(name, f"step_{index}", RuntimeError(str(index)))
        seen = tracker.current_test_name()
        tracker.end_test(name)
        return name, seen, index

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(
            pool.map(lambda index: contextvars.copy_context().run(run_test, index), range(32))
        )

    assert all(name == seen for name, seen, _ in results)
    snapshots = {snapshot.test_name: snapshot for snapshot in tracker.records()}
    assert len(snapshots) == 32
    for name, _, index in results:
        assert snapshots[name].screenshot_count == 25
        assert snapshots[name].has_failures is bool(index % 2)


def test_execution_summary_lists_totals_and_failures() -> None:
    tracker = ResultTracker(clock=SteppingClock())
    tracker.start_test("test_passes")
    tracker.record_screenshot("test_passes")
    tracker.end_test("test_passes")
    tracker.start_test("test_fails")
    tracker.record_failure("test_fails", "02_credentials_entered", TimeoutError("slow"))
    tracker.record_screenshot("test_fails")
    tracker.end_test("test_fails")

    summary = tracker.execution_summary().splitlines()

    assert summary[0] == "Test Execution Summary:"
    assert "Total Tests: 2" in summary
    assert "Failed Tests: 1" in summary
    assert "Passed Tests: 1" in summary
    assert "Total Screenshots: 2" in summary
    assert f"{'test_passes':<40} | PASSED | 500ms | 1 screenshots" in summary
    assert (
        f"{'test_fails':<40} | FAILED | 500ms | 1 screenshots"
        " | Step: 02_credentials_entered | Exception: TimeoutError"
    ) in summary


def test_detailed_failure_info() -> None:
    tracker = ResultTracker()
    tracker.start_test("test_fails")
    tracker.record_failure("test_fails", "03_submit", ValueError("bad input"))

    details = tracker.detailed_failure_info("test_fails")

    assert "Failure Step: 03_submit" in details
    assert "Exception Type: ValueError" in details
    assert "Exception Message: bad input" in details
    assert tracker.detailed_failure_info("test_other") == (
        "No failure information available for test: test_other"
    )


def test_clear_all_removes_every_record() -> None:
    tracker = ResultTracker()
    tracker.start_test("a")
    tracker.start_test("b")

    tracker.clear_all()

    assert tracker.records() == []
    assert tracker.current_test_name() is None
