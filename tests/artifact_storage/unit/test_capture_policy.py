"""Capture policy parsing tests."""

from __future__ import annotations

import pytest
from browser_e2e_harness.artifact_storage import (
    DEFAULT_CAPTURE_POLICY,
    CapturePolicy,
    parse_capture_policy,
)


def test_default_policy_is_failure_only() -> None:
    assert DEFAULT_CAPTURE_POLICY is CapturePolicy.FAILURE_ONLY


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("all", CapturePolicy.ALL_STEPS),
        (" ALL ", CapturePolicy.ALL_STEPS),
        ("all_steps", CapturePolicy.ALL_STEPS),
        ("failure-only", CapturePolicy.FAILURE_ONLY),
        ("Failure_Only", CapturePolicy.FAILURE_ONLY),
        (CapturePolicy.ALL_STEPS, CapturePolicy.ALL_STEPS),
    ],
)
def test_parse_capture_policy_accepts_aliases(raw: str, expected: CapturePolicy) -> None:
    assert parse_capture_policy(raw) is expected


def test_parse_capture_policy_rejects_unknown_mode() -> None:
    with pytest.raises(ValueError, match="Unknown screenshot mode 'sometimes'"):
        parse_capture_policy("sometimes")
