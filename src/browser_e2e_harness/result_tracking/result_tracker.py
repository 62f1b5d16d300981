"""Concurrent-safe tracker of test executions."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from contextvars import ContextVar
from datetime import datetime

from .execution_records import TestExecutionRecord, TestExecutionSnapshot

_LOGGER = logging.getLogger(__name__)

_RULE = "=" * 80
_DETAIL_RULE = "=" * 60


class ResultTracker:
    """Registry of test execution records keyed by test name.

    Records for distinct names may be created and updated from parallel
    threads or tasks. The "current test" is bound per execution context,
    so concurrently running tests never observe each other's binding.
    """

    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._records: dict[str, TestExecutionRecord] = {}
        self._current_test: ContextVar[str | None] = ContextVar(
            f"current_test_name_{id(self)}", default=None
        )

    def start_test(self, test_name: str) -> TestExecutionSnapshot:
        record = TestExecutionRecord(test_name, clock=self._clock)
        with self._lock:
            self._records[test_name] = record
        self._current_test.set(test_name)
        _LOGGER.info("Starting test: %s", test_name)
        return record.snapshot()

    def end_test(self, test_name: str) -> None:
        record = self._get(test_name)
        if record is not None:
            record.mark_ended()
            snapshot = record.snapshot()
            _LOGGER.info(
                "Completed test: %s (Duration: %dms, Screenshots: %d)",
                test_name,
                snapshot.duration_ms,
                snapshot.screenshot_count,
            )
        self._current_test.set(None)

    def record_failure(self, test_name: str, step_label: str, fault: BaseException) -> None:
        record = self._get(test_name)
        if record is None:
            return
        record.mark_failure(step_label, fault)
        _LOGGER.info("Test failure recorded: %s - Step: %s", test_name, step_label)

    def record_screenshot(self, test_name: str) -> None:
        record = self._get(test_name)
        if record is not None:
            record.increment_screenshots()

    def current_test_name(self) -> str | None:
        return self._current_test.get()

    def has_current_failures(self) -> bool:
        test_name = self.current_test_name()
        if test_name is None:
            return False
        record = self._get(test_name)
        return record is not None and record.has_failures

    def get_record(self, test_name: str) -> TestExecutionSnapshot | None:
        record = self._get(test_name)
        return record.snapshot() if record is not None else None

    def records(self) -> list[TestExecutionSnapshot]:
        with self._lock:
            current = list(self._records.values())
        return [record.snapshot() for record in current]

    def clear_all(self) -> None:
        with self._lock:
            self._records.clear()
        self._current_test.set(None)

    def execution_summary(self) -> str:
        """Render totals followed by one line per tracked test."""
        snapshots = self.records()
        total = len(snapshots)
        failed = sum(1 for snapshot in snapshots if snapshot.has_failures)
        screenshots = sum(snapshot.screenshot_count for snapshot in snapshots)

        lines = [
            "Test Execution Summary:",
            _RULE,
            f"Total Tests: {total}",
            f"Failed Tests: {failed}",
            f"Passed Tests: {total - failed}",
            f"Total Screenshots: {screenshots}",
            _RULE,
        ]
        for snapshot in snapshots:
            status = "FAILED" if snapshot.has_failures else "PASSED"
            details = ""
            if snapshot.has_failures:
                step = snapshot.last_failure_step or "Unknown"
                kind = snapshot.last_fault.kind if snapshot.last_fault else "Unknown"
                details = f" | Step: {step} | Exception: {kind}"
            lines.append(
                f"{snapshot.test_name:<40} | {status} | {snapshot.duration_ms}ms"
                f" | {snapshot.screenshot_count} screenshots{details}"
            )
        return "\n".join(lines)

    def detailed_failure_info(self, test_name: str) -> str:
        snapshot = self.get_record(test_name)
        if snapshot is None or not snapshot.has_failures:
            return f"No failure information available for test: {test_name}"
        fault = snapshot.last_fault
        return "\n".join(
            [
                "Detailed Failure Information:",
                _DETAIL_RULE,
                f"Test Name: {snapshot.test_name}",
                f"Failure Step: {snapshot.last_failure_step}",
                f"Exception Type: {fault.kind if fault else 'Unknown'}",
                f"Exception Message: {fault.message if fault else ''}",
                f"Execution Time: {snapshot.duration_ms}ms",
                f"Screenshots Captured: {snapshot.screenshot_count}",
                _DETAIL_RULE,
            ]
        )

    def _get(self, test_name: str) -> TestExecutionRecord | None:
        with self._lock:
            return self._records.get(test_name)
