"""Artifact storage exports."""

from .artifact_manifest import MANIFEST_FILENAME, ArtifactManifest
from .artifact_naming import (
    FAILURE_LABEL_PREFIX,
    ArtifactName,
    build_artifact_filename,
    parse_artifact_filename,
    sanitize_label,
)
from .artifact_records import UNKNOWN_CONTEXT_VALUE, ArtifactRecord, FailureContext
from .capture_policy import DEFAULT_CAPTURE_POLICY, CapturePolicy, parse_capture_policy
from .screenshot_store import ScreenshotSource, ScreenshotStore

__all__ = [
    "MANIFEST_FILENAME",
    "ArtifactManifest",
    "FAILURE_LABEL_PREFIX",
    "ArtifactName",
    "build_artifact_filename",
    "parse_artifact_filename",
    "sanitize_label",
    "UNKNOWN_CONTEXT_VALUE",
    "ArtifactRecord",
    "FailureContext",
    "DEFAULT_CAPTURE_POLICY",
    "CapturePolicy",
    "parse_capture_policy",
    "ScreenshotSource",
    "ScreenshotStore",
]
