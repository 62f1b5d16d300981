"""Screenshot persistence service."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from contextvars import ContextVar
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

from browser_e2e_harness.execution_identity import ExecutionIdentity, extract_execution_id

from .artifact_manifest import ArtifactManifest
from .artifact_naming import (
    ARTIFACT_SUFFIX,
    FAILURE_LABEL_PREFIX,
    build_artifact_filename,
    is_artifact_filename,
    sanitize_label,
)
from .artifact_records import ArtifactRecord, FailureContext
from .capture_policy import DEFAULT_CAPTURE_POLICY, CapturePolicy

_LOGGER = logging.getLogger(__name__)


class ScreenshotSource(Protocol):  # pylint: disable=too-few-public-methods
    """Render target able to produce a PNG screenshot (e.g. a Selenium WebDriver)."""

    def get_screenshot_as_png(self) -> bytes: ...


class ScreenshotStore:
    """Writes screenshots into a flat directory, one file per artifact.

    The step counter is shared by every test of the run. The failure flag
    consulted by the failure-only policy is bound to the calling context so
    a failing test never unlocks captures for a test running in parallel.
    """

    def __init__(
        self,
        directory: Path | str,
        identity: ExecutionIdentity,
        *,
        policy: CapturePolicy = DEFAULT_CAPTURE_POLICY,
        manifest: ArtifactManifest | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._directory = Path(directory)
        self._identity = identity
        self._policy = policy
        self._manifest = manifest
        self._clock = clock or (lambda: datetime.now(UTC))
        self._counter_lock = threading.Lock()
        self._step_counter = 1
        self._failure_marked: ContextVar[bool] = ContextVar(
            f"screenshot_failure_marked_{id(self)}", default=False
        )

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def identity(self) -> ExecutionIdentity:
        return self._identity

    @property
    def manifest(self) -> ArtifactManifest | None:
        return self._manifest

    @property
    def policy(self) -> CapturePolicy:
        return self._policy

    def set_policy(self, policy: CapturePolicy) -> None:
        self._policy = policy
        _LOGGER.info(
            "Screenshot mode: %s",
            "FAILURE-ONLY" if policy is CapturePolicy.FAILURE_ONLY else "ALL-STEPS",
        )

    def mark_failure(self) -> None:
        self._failure_marked.set(True)

    def has_failure_occurred(self) -> bool:
        return self._failure_marked.get()

    def should_capture(self) -> bool:
        return self._policy is CapturePolicy.ALL_STEPS or self.has_failure_occurred()

    def reset_step_counter(self) -> None:
        """Restart ordinals at 1 and clear the failure flag; call once per test start."""
        with self._counter_lock:
            self._step_counter = 1
        self._failure_marked.set(False)

    def capture(
        self,
        source: ScreenshotSource,
        label: str,
        *,
        test_name: str | None = None,
        failure_context: FailureContext | None = None,
    ) -> Path | None:
        """Persist a screenshot for ``label`` if the policy allows it.

        Returns the written path, or None when skipped or when capturing
        failed. Capture failures are logged and never raised.
        """
        if not self.should_capture():
            _LOGGER.debug("Screenshot skipped by %s policy: %s", self._policy.value, label)
            return None
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            ordinal = self._next_ordinal()
            execution_id = self._identity.current()
            filename = build_artifact_filename(ordinal, label, execution_id)
            destination = self._directory / filename
            destination.write_bytes(source.get_screenshot_as_png())
        except Exception:  # pylint: disable=broad-exception-caught
            _LOGGER.warning("Failed to capture screenshot '%s'", label, exc_info=True)
            return None

        self._record(
            ArtifactRecord(
                filename=filename,
                ordinal=ordinal,
                step_name=label,
                label=sanitize_label(label),
                execution_id=execution_id,
                failure=label.startswith(FAILURE_LABEL_PREFIX),
                captured_at=self._clock(),
                test_name=test_name,
                failure_context=failure_context,
            )
        )
        _LOGGER.info("Screenshot captured: %s", destination)
        return destination

    def capture_failure(
        self,
        source: ScreenshotSource,
        label: str,
        *,
        test_name: str | None = None,
        failure_context: FailureContext | None = None,
    ) -> Path | None:
        self.mark_failure()
        return self.capture(
            source,
            f"{FAILURE_LABEL_PREFIX}{label}",
            test_name=test_name,
            failure_context=failure_context,
        )

    def prune_stale_runs(self, directory: Path | str | None = None) -> int:
        """Delete artifacts whose execution ID differs from the current run.

        Returns the number of deleted files. A missing directory is a no-op.
        """
        target = Path(directory) if directory is not None else self._directory
        if not target.is_dir():
            return 0
        current_id = self._identity.current()
        by_execution: dict[str, list[Path]] = {}
        for path in sorted(target.iterdir()):
            if path.is_file() and is_artifact_filename(path.name):
                by_execution.setdefault(extract_execution_id(path.name), []).append(path)

        deleted = 0
        retained: list[str] = []
        for execution_id, paths in by_execution.items():
            if execution_id == current_id:
                retained.extend(path.name for path in paths)
                continue
            for path in paths:
                try:
                    path.unlink()
                    deleted += 1
                except OSError:
                    _LOGGER.warning("Failed to delete stale screenshot %s", path, exc_info=True)
                    retained.append(path.name)

        self._prune_manifest(target, retained)
        if deleted:
            _LOGGER.info("Cleaned up %d old screenshots from previous test runs", deleted)
        else:
            _LOGGER.info("Keeping all screenshots from current execution: %s", current_id)
        return deleted

    def list_artifacts(self, directory: Path | str | None = None) -> list[Path]:
        target = Path(directory) if directory is not None else self._directory
        if not target.is_dir():
            return []
        return sorted(path for path in target.glob(f"*{ARTIFACT_SUFFIX}") if path.is_file())

    def _next_ordinal(self) -> int:
        with self._counter_lock:
            ordinal = self._step_counter
            self._step_counter += 1
            return ordinal

    def _record(self, record: ArtifactRecord) -> None:
        if self._manifest is None:
            return
        try:
            self._manifest.append(record)
        except OSError:
            _LOGGER.warning(
                "Failed to update artifact manifest for %s", record.filename, exc_info=True
            )

    def _prune_manifest(self, target: Path, retained: list[str]) -> None:
        if self._manifest is None or self._manifest.path.parent.resolve() != target.resolve():
            return
        try:
            self._manifest.retain(retained)
        except OSError:
            _LOGGER.warning(
                "Failed to rewrite artifact manifest %s", self._manifest.path, exc_info=True
            )
