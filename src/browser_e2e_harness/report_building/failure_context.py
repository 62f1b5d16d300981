"""Best-effort decoding of test context from failure labels."""

from __future__ import annotations

from browser_e2e_harness.artifact_storage import ArtifactRecord, FailureContext

FAILURE_TOKEN = "Failure"


def decode_failure_context(label: str) -> FailureContext:
    """Read ``<Class>_<method>_<FaultKind>_Failure`` from a label.

    The last ``Failure`` token anchors the grammar and the three tokens in
    front of it are taken as class, method and fault kind. Method names
    with underscores break this positional reading, which is why manifest
    records are preferred when available. Non-matching labels yield an
    all-"Unknown" context.
    """
    parts = label.split("_")
    anchor = _last_index(parts, FAILURE_TOKEN)
    if anchor is None or anchor < 3:
        return FailureContext()
    test_class, test_method, fault_kind = parts[anchor - 3 : anchor]
    if not (test_class and test_method and fault_kind):
        return FailureContext()
    return FailureContext(test_class=test_class, test_method=test_method, fault_kind=fault_kind)


def resolve_failure_context(label: str, record: ArtifactRecord | None) -> FailureContext:
    if record is not None and record.failure_context is not None:
        return record.failure_context
    return decode_failure_context(label)


def _last_index(parts: list[str], token: str) -> int | None:
    for index in range(len(parts) - 1, -1, -1):
        if parts[index] == token:
            return index
    return None
