"""Screenshot artifact filename encoding and decoding."""

from __future__ import annotations

import re
from dataclasses import dataclass

from browser_e2e_harness.execution_identity import UNKNOWN_EXECUTION_ID, extract_execution_id

ARTIFACT_SUFFIX = ".png"
ARTIFACT_PREFIX = "step_"
FAILURE_LABEL_PREFIX = "FAILURE_"
FAILURE_MARKER = "failure"

_UNSAFE_LABEL_CHARACTERS = re.compile(r"[^A-Za-z0-9_]")
_ORDINAL_PATTERN = re.compile(r"^step_(\d+)_(.*)$")


@dataclass(frozen=True)
class ArtifactName:
    """Decoded parts of one screenshot filename."""

    filename: str
    ordinal: int | None
    label: str
    execution_id: str

    @property
    def is_failure(self) -> bool:
        return FAILURE_MARKER in self.label.lower()

    @property
    def sort_key(self) -> tuple[int, str]:
        return (self.ordinal if self.ordinal is not None else -1, self.filename)


def sanitize_label(label: str) -> str:
    """Replace every character outside ``[A-Za-z0-9_]`` with an underscore."""
    return _UNSAFE_LABEL_CHARACTERS.sub("_", label)


def build_artifact_filename(ordinal: int, label: str, execution_id: str) -> str:
    return f"{ARTIFACT_PREFIX}{ordinal:02d}_{sanitize_label(label)}_{execution_id}{ARTIFACT_SUFFIX}"


def is_artifact_filename(filename: str) -> bool:
    return filename.endswith(ARTIFACT_SUFFIX)


def parse_artifact_filename(filename: str) -> ArtifactName:
    """Decode ordinal, label and execution ID; unparseable parts fall back to sentinels."""
    stem = filename[: -len(ARTIFACT_SUFFIX)] if filename.endswith(ARTIFACT_SUFFIX) else filename
    match = _ORDINAL_PATTERN.match(stem)
    ordinal = int(match.group(1)) if match else None
    remainder = match.group(2) if match else stem

    execution_id = extract_execution_id(stem)
    label = remainder
    if execution_id != UNKNOWN_EXECUTION_ID and remainder.endswith(execution_id):
        label = remainder[: -len(execution_id)].rstrip("_")
    return ArtifactName(
        filename=filename,
        ordinal=ordinal,
        label=label,
        execution_id=execution_id,
    )
