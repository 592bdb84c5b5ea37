"""Type definitions for deadline-bounded outbound calls."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

CallStatus = Literal["success", "timeout", "error"]


class CallResult(BaseModel):
    """Outcome of one outbound call run under a deadline."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: CallStatus
    value: Any = None
    error: str | None = None
    latency_ms: int

    @property
    def ok(self) -> bool:
        return self.status == "success"
