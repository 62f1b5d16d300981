"""Execution identity generation and label parsing."""

from __future__ import annotations

import itertools
import logging
import re
import secrets
import threading
from collections.abc import Callable
from datetime import UTC, datetime

EXECUTION_ID_PREFIX = "exec_"
UNKNOWN_EXECUTION_ID = "unknown"

_EXECUTION_ID_TOKEN = EXECUTION_ID_PREFIX.rstrip("_")
_EXECUTION_ID_PATTERN = re.compile(r"exec_\d{8}_\d{6}_[0-9a-f]{8}_\d+")
_ARTIFACT_SUFFIX = ".png"

_LOGGER = logging.getLogger(__name__)


class ExecutionIdentity:
    """Owns the identifier shared by every artifact of one test run.

    The identifier is created lazily on first access and stays stable until
    `clear` is called, so several logical runs can share one process.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] | None = None,
        token_factory: Callable[[], str] | None = None,
    ) -> None:
        self._clock = clock or (lambda: datetime.now(UTC))
        self._token_factory = token_factory or (lambda: secrets.token_hex(4))
        self._counter = itertools.count(1)
        self._lock = threading.Lock()
        self._current: str | None = None

    def current(self) -> str:
        """Return the identity of the active run, generating it on first use."""
        with self._lock:
            if self._current is None:
                self._current = self._generate_locked()
                _LOGGER.info("Execution started with ID: %s", self._current)
            return self._current

    def generate(self) -> str:
        """Build a fresh identity without changing the active one."""
        with self._lock:
            return self._generate_locked()

    def clear(self) -> None:
        """Forget the active identity so the next `current` call regenerates it."""
        with self._lock:
            if self._current is not None:
                _LOGGER.info("Execution completed: %s", self._current)
            self._current = None

    def adopt(self, execution_id: str) -> None:
        """Pin an explicit identity, e.g. to report on an earlier run."""
        if not execution_id.startswith(EXECUTION_ID_PREFIX):
            raise ValueError(
                f"Execution ID must start with '{EXECUTION_ID_PREFIX}': {execution_id}"
            )
        with self._lock:
            self._current = execution_id
        _LOGGER.info("Execution ID set: %s", execution_id)

    @property
    def is_active(self) -> bool:
        return self._current is not None

    def belongs_to_current(self, label: str) -> bool:
        return extract_execution_id(label) == self.current()

    def _generate_locked(self) -> str:
        timestamp = self._clock().strftime("%Y%m%d_%H%M%S")
        token = self._token_factory()[:8]
        return f"{EXECUTION_ID_PREFIX}{timestamp}_{token}_{next(self._counter)}"


def extract_execution_id(label: str) -> str:
    """Find the execution identity embedded in an artifact label or filename.

    Labels are free text joined with underscores, so a step name may itself
    contain an ``exec`` token. The token whose remainder forms a complete
    identity wins; otherwise the last ``exec`` token is used as-is. Labels
    without any such token resolve to `UNKNOWN_EXECUTION_ID`.
    """
    name = label[: -len(_ARTIFACT_SUFFIX)] if label.endswith(_ARTIFACT_SUFFIX) else label
    parts = name.split("_")
    candidates = [index for index, part in enumerate(parts) if part == _EXECUTION_ID_TOKEN]
    for index in candidates:
        candidate = "_".join(parts[index:])
        if _EXECUTION_ID_PATTERN.fullmatch(candidate):
            return candidate
    if candidates:
        return "_".join(parts[candidates[-1] :])
    return UNKNOWN_EXECUTION_ID
