"""Screenshot capture policy."""

from __future__ import annotations

from enum import Enum


class CapturePolicy(str, Enum):
    """Decides which step screenshots are persisted."""

    ALL_STEPS = "all"
    FAILURE_ONLY = "failure-only"


DEFAULT_CAPTURE_POLICY = CapturePolicy.FAILURE_ONLY

_ALIASES = {
    "all": CapturePolicy.ALL_STEPS,
    "all-steps": CapturePolicy.ALL_STEPS,
    "all_steps": CapturePolicy.ALL_STEPS,
    "failure-only": CapturePolicy.FAILURE_ONLY,
    "failure_only": CapturePolicy.FAILURE_ONLY,
}


def parse_capture_policy(value: str | CapturePolicy) -> CapturePolicy:
    """Resolve a configured capture mode, case-insensitively."""
    if isinstance(value, CapturePolicy):
        return value
    policy = _ALIASES.get(value.strip().lower())
    if policy is None:
        allowed = ", ".join(member.value for member in CapturePolicy)
        raise ValueError(f"Unknown screenshot mode '{value}'. Expected one of: {allowed}.")
    return policy
