"""Run a coroutine under a deadline and report the outcome as a value."""

import asyncio
import logging
import time
from collections.abc import Awaitable
from typing import Any

from travelme.engine.exec.types import CallResult
from travelme.engine.metrics.core import record_llm_call

logger = logging.getLogger(__name__)


async def call_with_deadline(
    coro: Awaitable[Any], timeout_s: float, name: str
) -> CallResult:
    """Await ``coro`` for at most ``timeout_s`` seconds.

    The awaited call is cancelled when the deadline passes. A timeout is
    reported as ``status="timeout"`` with no value; any exception raised by
    the call is reported as ``status="error"``. Nothing is raised, except
    cancellation of the calling task itself.

    Args:
        coro: Awaitable performing the outbound call.
        timeout_s: Deadline in seconds.
        name: Call name used for logging and metrics.

    Returns:
        CallResult describing the outcome.
    """
    start = time.perf_counter()
    try:
        value = await asyncio.wait_for(coro, timeout=timeout_s)
    except TimeoutError:
        latency_ms = int((time.perf_counter() - start) * 1000)
        logger.warning(
            f"{name} timed out after {timeout_s}s",
            extra={"call": name, "timeout_s": timeout_s},
        )
        record_llm_call(name, latency_ms, ok=False, error_kind="timeout")
        return CallResult(status="timeout", latency_ms=latency_ms)
    except asyncio.CancelledError:
        raise
    except Exception as e:
        latency_ms = int((time.perf_counter() - start) * 1000)
        logger.warning(
            f"{name} failed: {e}",
            extra={"call": name, "error_type": type(e).__name__},
        )
        record_llm_call(name, latency_ms, ok=False, error_kind=type(e).__name__)
        return CallResult(status="error", error=str(e), latency_ms=latency_ms)

    latency_ms = int((time.perf_counter() - start) * 1000)
    record_llm_call(name, latency_ms, ok=True, error_kind=None)
    return CallResult(status="success", value=value, latency_ms=latency_ms)
