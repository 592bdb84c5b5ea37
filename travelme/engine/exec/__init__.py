"""Deadline-bounded execution of outbound calls."""

from travelme.engine.exec.deadline import call_with_deadline
from travelme.engine.exec.types import CallResult, CallStatus

__all__ = [
    "call_with_deadline",
    "CallResult",
    "CallStatus",
]
