"""Execution identity exports."""

from .execution_ids import (
    EXECUTION_ID_PREFIX,
    UNKNOWN_EXECUTION_ID,
    ExecutionIdentity,
    extract_execution_id,
)

__all__ = [
    "EXECUTION_ID_PREFIX",
    "UNKNOWN_EXECUTION_ID",
    "ExecutionIdentity",
    "extract_execution_id",
]
