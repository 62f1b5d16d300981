"""Step execution with failure recording and screenshot capture."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol, TypeVar, cast

from browser_e2e_harness.artifact_storage import FailureContext, ScreenshotSource, ScreenshotStore
from browser_e2e_harness.result_tracking import ResultTracker

T = TypeVar("T")
E = TypeVar("E")

FAILURE_STEP_SUFFIX = "Failure"

_LOGGER = logging.getLogger(__name__)


class NavigableDriver(ScreenshotSource, Protocol):  # pylint: disable=too-few-public-methods
    """Driver capability needed by the navigation helper."""

    def get(self, url: str) -> None: ...


def build_failure_step_label(test_class: str, test_method: str, fault: BaseException) -> str:
    """Label for a fault that escaped a test: ``<Class>_<method>_<FaultKind>_Failure``."""
    return f"{test_class}_{test_method}_{type(fault).__name__}_{FAILURE_STEP_SUFFIX}"


class StepRunner:
    """Runs test steps, recording faults before forwarding them unchanged.

    One runner serves one test and its screenshot source. Recording and
    screenshotting are best-effort: their own errors are logged and never
    replace the fault raised by the step.
    """

    def __init__(
        self,
        tracker: ResultTracker,
        store: ScreenshotStore,
        source: ScreenshotSource | None = None,
        *,
        capture_on_failure: bool = True,
    ) -> None:
        self._tracker = tracker
        self._store = store
        self._source = source
        self._capture_on_failure = capture_on_failure
        self._handled_faults: list[BaseException] = []

    @property
    def source(self) -> ScreenshotSource | None:
        return self._source

    def run_step(
        self,
        name: str,
        description: str,
        work: Callable[[], T],
        *,
        capture_screenshot: bool | None = None,
    ) -> T:
        """Execute ``work`` and return its result; faults are recorded and re-raised."""
        _LOGGER.info("Executing step: %s - %s", name, description)
        try:
            result = work()
        except Exception as exc:
            if self.was_handled(exc):
                raise
            _LOGGER.error("Step failed: %s - %s", name, exc)
            should_capture = (
                self._capture_on_failure if capture_screenshot is None else capture_screenshot
            )
            self.handle_step_failure(name, exc, capture_screenshot=should_capture)
            raise
        _LOGGER.info("Step completed: %s", name)
        return result

    def run_action(
        self,
        name: str,
        description: str,
        work: Callable[[], Any],
        *,
        capture_screenshot: bool | None = None,
    ) -> None:
        self.run_step(name, description, work, capture_screenshot=capture_screenshot)

    def guarded_element_action(
        self,
        name: str,
        element_supplier: Callable[[], E],
        action: Callable[[E], Any],
    ) -> None:
        self.run_action(name, "Interacting with element", lambda: action(element_supplier()))

    def guarded_assert(self, name: str, description: str, assertion: Callable[[], Any]) -> None:
        self.run_action(name, f"Asserting {description}", assertion)

    def navigate(self, name: str, url: str) -> None:
        driver = cast(NavigableDriver, self._require_source())
        self.run_action(name, f"Navigating to {url}", lambda: driver.get(url))

    def wait_for(self, name: str, description: str, condition: Callable[[], T]) -> T:
        return self.run_step(name, f"Waiting for {description}", condition)

    def capture(self, label: str) -> Path | None:
        """Screenshot a successful step according to the capture policy."""
        if self._source is None:
            return None
        test_name = self._tracker.current_test_name()
        path = self._store.capture(self._source, label, test_name=test_name)
        if path is not None and test_name is not None:
            self._tracker.record_screenshot(test_name)
        return path

    def handle_step_failure(
        self, name: str, fault: BaseException, *, capture_screenshot: bool
    ) -> Path | None:
        test_name = self._tracker.current_test_name()
        self._handled_faults.append(fault)
        try:
            if test_name is not None:
                self._tracker.record_failure(test_name, name, fault)
            if not capture_screenshot:
                return None
            path = self._capture_failure(name, test_name=test_name)
        except Exception:  # pylint: disable=broad-exception-caught
            _LOGGER.warning("Failed to record failure of step '%s'", name, exc_info=True)
            return None
        if path is not None:
            fault.add_note(f"Failure screenshot: {path}")
        return path

    def handle_test_fault(
        self, test_class: str, test_method: str, fault: BaseException
    ) -> Path | None:
        """Record a fault that escaped the test body outside of any step.

        Faults already handled by a step of this runner are ignored so each
        fault is recorded and screenshotted once.
        """
        if self.was_handled(fault):
            return None
        test_name = self._tracker.current_test_name()
        label = build_failure_step_label(test_class, test_method, fault)
        self._handled_faults.append(fault)
        _LOGGER.error(
            "Test execution failed: %s (%s.%s, %s: %s)",
            test_name,
            test_class,
            test_method,
            type(fault).__name__,
            fault,
        )
        try:
            if test_name is not None:
                self._tracker.record_failure(test_name, label, fault)
            return self._capture_failure(
                label,
                test_name=test_name,
                failure_context=FailureContext(
                    test_class=test_class,
                    test_method=test_method,
                    fault_kind=type(fault).__name__,
                ),
            )
        except Exception:  # pylint: disable=broad-exception-caught
            _LOGGER.warning("Failed to record test fault '%s'", label, exc_info=True)
            return None

    def was_handled(self, fault: BaseException) -> bool:
        return any(fault is handled for handled in self._handled_faults)

    def _capture_failure(
        self,
        label: str,
        *,
        test_name: str | None,
        failure_context: FailureContext | None = None,
    ) -> Path | None:
        if self._source is None:
            self._store.mark_failure()
            return None
        path = self._store.capture_failure(
            self._source, label, test_name=test_name, failure_context=failure_context
        )
        if path is not None and test_name is not None:
            self._tracker.record_screenshot(test_name)
        return path

    def _require_source(self) -> ScreenshotSource:
        if self._source is None:
            raise RuntimeError("This step requires a browser driver, but none was provided.")
        return self._source
