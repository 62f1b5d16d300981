"""Artifact storage entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

UNKNOWN_CONTEXT_VALUE = "Unknown"


@dataclass(frozen=True)
class FailureContext:
    """Test class, method and fault kind behind a failure screenshot."""

    test_class: str = UNKNOWN_CONTEXT_VALUE
    test_method: str = UNKNOWN_CONTEXT_VALUE
    fault_kind: str = UNKNOWN_CONTEXT_VALUE

    @property
    def is_detailed(self) -> bool:
        return any(
            value != UNKNOWN_CONTEXT_VALUE
            for value in (self.test_class, self.test_method, self.fault_kind)
        )


@dataclass(frozen=True)
class ArtifactRecord:  # pylint: disable=too-many-instance-attributes
    """Structured description of one captured screenshot (one manifest line)."""

    filename: str
    ordinal: int
    step_name: str
    label: str
    execution_id: str
    failure: bool
    captured_at: datetime
    test_name: str | None = None
    failure_context: FailureContext | None = None

    def to_mapping(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "filename": self.filename,
            "ordinal": self.ordinal,
            "step_name": self.step_name,
            "label": self.label,
            "execution_id": self.execution_id,
            "failure": self.failure,
            "captured_at": self.captured_at.isoformat(),
            "test_name": self.test_name,
            "failure_context": None,
        }
        if self.failure_context is not None:
            payload["failure_context"] = {
                "test_class": self.failure_context.test_class,
                "test_method": self.failure_context.test_method,
                "fault_kind": self.failure_context.fault_kind,
            }
        return payload

    @staticmethod
    def from_mapping(payload: Mapping[str, Any]) -> ArtifactRecord:
        """Rebuild a record from a manifest line; malformed input raises KeyError or ValueError."""
        raw_context = payload.get("failure_context")
        failure_context = None
        if raw_context is not None:
            failure_context = FailureContext(
                test_class=str(raw_context.get("test_class") or UNKNOWN_CONTEXT_VALUE),
                test_method=str(raw_context.get("test_method") or UNKNOWN_CONTEXT_VALUE),
                fault_kind=str(raw_context.get("fault_kind") or UNKNOWN_CONTEXT_VALUE),
            )
        test_name = payload.get("test_name")
        return ArtifactRecord(
            filename=str(payload["filename"]),
            ordinal=int(payload["ordinal"]),
            step_name=str(payload["step_name"]),
            label=str(payload["label"]),
            execution_id=str(payload["execution_id"]),
            failure=bool(payload["failure"]),
            captured_at=datetime.fromisoformat(str(payload["captured_at"])),
            test_name=str(test_name) if test_name is not None else None,
            failure_context=failure_context,
        )
