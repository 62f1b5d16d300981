"""Run-wide harness state, constructed explicitly from configuration."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from browser_e2e_harness.artifact_storage import ArtifactManifest, ScreenshotSource, ScreenshotStore
from browser_e2e_harness.configuration import Configuration
from browser_e2e_harness.execution_identity import ExecutionIdentity
from browser_e2e_harness.failure_coordination import StepRunner
from browser_e2e_harness.report_building import ReportGenerator, ReportOutcome
from browser_e2e_harness.result_tracking import ResultTracker, TestExecutionSnapshot

_LOGGER = logging.getLogger(__name__)


@dataclass
class HarnessContext:
    """Owner of the identity, store, tracker and report generator of one run."""

    configuration: Configuration
    identity: ExecutionIdentity
    store: ScreenshotStore
    tracker: ResultTracker
    report_generator: ReportGenerator
    stale_runs_pruned: bool = field(default=False, init=False)

    @classmethod
    def build(
        cls, configuration: Configuration, identity: ExecutionIdentity | None = None
    ) -> HarnessContext:
        run_identity = identity or ExecutionIdentity()
        screenshots = configuration.screenshots
        manifest = ArtifactManifest(screenshots.directory) if screenshots.manifest else None
        store = ScreenshotStore(
            screenshots.directory,
            run_identity,
            policy=screenshots.mode,
            manifest=manifest,
        )
        report_generator = ReportGenerator(
            store,
            scenarios=configuration.report.scenarios,
            title=configuration.report.title,
        )
        _LOGGER.info("Harness context ready for execution %s", run_identity.current())
        return cls(
            configuration=configuration,
            identity=run_identity,
            store=store,
            tracker=ResultTracker(),
            report_generator=report_generator,
        )

    def begin_test(self, test_name: str) -> TestExecutionSnapshot:
        """Start tracking ``test_name`` and restart step numbering for it.

        The first test of the context removes screenshots left by earlier runs.
        """
        if not self.stale_runs_pruned:
            self.stale_runs_pruned = True
            self.prune_stale_runs()
        self.store.set_policy(self.configuration.screenshots.mode)
        self.store.reset_step_counter()
        return self.tracker.start_test(test_name)

    def end_test(self, test_name: str) -> None:
        self.tracker.end_test(test_name)

    def prune_stale_runs(self) -> int:
        try:
            return self.store.prune_stale_runs()
        except OSError:
            _LOGGER.warning(
                "Failed to clean screenshots of earlier runs in %s",
                self.store.directory,
                exc_info=True,
            )
            return 0

    def step_runner(self, source: ScreenshotSource | None = None) -> StepRunner:
        return StepRunner(self.tracker, self.store, source)

    @contextmanager
    def tracked_test(
        self,
        test_name: str,
        *,
        source: ScreenshotSource | None = None,
        test_class: str | None = None,
        test_method: str | None = None,
    ) -> Iterator[StepRunner]:
        """Track one test around the ``with`` body.

        Faults escaping the body that no step recorded are recorded as
        test-level failures, then propagated unchanged.
        """
        runner = self.step_runner(source)
        self.begin_test(test_name)
        try:
            yield runner
        except Exception as exc:
            runner.handle_test_fault(test_class or "Test", test_method or test_name, exc)
            raise
        finally:
            self.end_test(test_name)

    def generate_report(self) -> ReportOutcome | None:
        report = self.configuration.report
        return self.report_generator.generate(
            self.configuration.screenshots.directory, report.path
        )
