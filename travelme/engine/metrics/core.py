"""Metrics façade for outbound call tracking."""

import logging

logger = logging.getLogger(__name__)


def record_llm_call(
    name: str,
    latency_ms: int,
    ok: bool,
    error_kind: str | None,
    tokens_in: int | None = None,
    tokens_out: int | None = None,
) -> None:
    """Record metrics for one model, embedding or routing call.

    Logs a single structured record; a metrics backend can pick it up from
    the log stream.

    Args:
        name: Call name, e.g. "synthesis:gpt-4o-mini" or "routing".
        latency_ms: Latency in milliseconds.
        ok: Whether the call succeeded.
        error_kind: "timeout", an exception class name, or None on success.
        tokens_in: Optional prompt token count.
        tokens_out: Optional completion token count.
    """
    logger.info(
        "llm_call_metric",
        extra={
            "call": name,
            "latency_ms": latency_ms,
            "ok": ok,
            "error_kind": error_kind,
            "tokens_in": tokens_in,
            "tokens_out": tokens_out,
        },
    )
