"""Result tracking exports."""

from .execution_records import RecordedFault, TestExecutionRecord, TestExecutionSnapshot
from .result_tracker import ResultTracker

__all__ = [
    "RecordedFault",
    "TestExecutionRecord",
    "TestExecutionSnapshot",
    "ResultTracker",
]
