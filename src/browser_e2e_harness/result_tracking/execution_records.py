"""Result tracking entities."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class RecordedFault:
    """Kind and message of the exception that failed a step."""

    kind: str
    message: str

    @staticmethod
    def from_exception(fault: BaseException) -> RecordedFault:
        return RecordedFault(kind=type(fault).__name__, message=str(fault))


@dataclass(frozen=True)
class TestExecutionSnapshot:  # pylint: disable=too-many-instance-attributes
    """Consistent read-only view of one test execution record."""

    __test__ = False

    test_name: str
    start_time: datetime
    end_time: datetime | None
    has_failures: bool
    last_fault: RecordedFault | None
    last_failure_step: str | None
    screenshot_count: int
    duration_ms: int


class TestExecutionRecord:
    """Mutable execution state of one test, safe to update from several threads.

    The failure flag is sticky: once set it stays set for the lifetime of
    the record, while the fault and step describe the latest failure.
    """

    __test__ = False

    def __init__(self, test_name: str, *, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or _utc_now
        self._lock = threading.Lock()
        self.test_name = test_name
        self.start_time = self._clock()
        self._end_time: datetime | None = None
        self._has_failures = False
        self._last_fault: RecordedFault | None = None
        self._last_failure_step: str | None = None
        self._screenshot_count = 0

    def mark_ended(self) -> None:
        with self._lock:
            self._end_time = self._clock()

    def mark_failure(self, step_label: str, fault: BaseException) -> None:
        with self._lock:
            self._has_failures = True
            self._last_fault = RecordedFault.from_exception(fault)
            self._last_failure_step = step_label

    def increment_screenshots(self) -> None:
        with self._lock:
            self._screenshot_count += 1

    @property
    def has_failures(self) -> bool:
        with self._lock:
            return self._has_failures

    def snapshot(self) -> TestExecutionSnapshot:
        with self._lock:
            end = self._end_time
            return TestExecutionSnapshot(
                test_name=self.test_name,
                start_time=self.start_time,
                end_time=end,
                has_failures=self._has_failures,
                last_fault=self._last_fault,
                last_failure_step=self._last_failure_step,
                screenshot_count=self._screenshot_count,
                duration_ms=_elapsed_ms(self.start_time, end or self._clock()),
            )


def _elapsed_ms(start: datetime, end: datetime) -> int:
    return max(0, int((end - start).total_seconds() * 1000))
