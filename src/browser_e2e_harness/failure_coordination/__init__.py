"""Failure coordination exports."""

from .step_runner import FAILURE_STEP_SUFFIX, StepRunner, build_failure_step_label

__all__ = [
    "FAILURE_STEP_SUFFIX",
    "StepRunner",
    "build_failure_step_label",
]
