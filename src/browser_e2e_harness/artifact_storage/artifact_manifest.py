"""Sidecar manifest describing captured screenshots as JSON lines."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterable
from pathlib import Path

from .artifact_records import ArtifactRecord

MANIFEST_FILENAME = "artifact-manifest.jsonl"

_LOGGER = logging.getLogger(__name__)


class ArtifactManifest:
    """Append-only JSON-lines index stored beside the screenshots.

    Filenames stay authoritative for run identity; the manifest only adds
    structure (raw step name, owning test, failure context) that would
    otherwise have to be guessed from underscore-separated tokens.
    """

    def __init__(self, directory: Path | str) -> None:
        self._path = Path(directory) / MANIFEST_FILENAME
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def append(self, record: ArtifactRecord) -> None:
        line = json.dumps(record.to_mapping(), ensure_ascii=False, sort_keys=True)
        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")

    def read(self) -> dict[str, ArtifactRecord]:
        """Return records keyed by filename; unreadable lines are skipped."""
        with self._lock:
            if not self._path.exists():
                return {}
            try:
                lines = self._path.read_text(encoding="utf-8").splitlines()
            except UnicodeDecodeError:
                _LOGGER.warning("Ignoring undecodable manifest %s", self._path, exc_info=True)
                return {}
        records: dict[str, ArtifactRecord] = {}
        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                record = ArtifactRecord.from_mapping(json.loads(line))
            except (json.JSONDecodeError, KeyError, ValueError, TypeError, AttributeError):
                _LOGGER.warning(
                    "Skipping malformed manifest line %d in %s", line_number, self._path
                )
                continue
            records[record.filename] = record
        return records

    def retain(self, filenames: Iterable[str]) -> int:
        """Rewrite the manifest keeping only the given filenames; returns dropped count."""
        keep = set(filenames)
        current = self.read()
        retained = [record for name, record in current.items() if name in keep]
        with self._lock:
            if not self._path.exists():
                return 0
            payload = "".join(
                json.dumps(record.to_mapping(), ensure_ascii=False, sort_keys=True) + "\n"
                for record in retained
            )
            self._path.write_text(payload, encoding="utf-8")
        return len(current) - len(retained)
