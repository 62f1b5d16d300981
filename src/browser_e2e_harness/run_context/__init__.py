"""Run context exports."""

from .harness_context import HarnessContext

__all__ = ["HarnessContext"]
