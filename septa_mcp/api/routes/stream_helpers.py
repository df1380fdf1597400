"""Stream Helpers: SSE framing and the endpoint-announcing event generator.

Invariants:
    - First frame of every stream is exactly one `endpoint` event
    - Keep-alive frames are SSE comments (": ping"), never events
    - Stream ends normally on max duration or cancellation (client disconnect
      cancels the generator through StreamingResponse)
    - Idle waiting is asyncio.sleep, never busy polling

Design Decisions:
    - Generator kept free of FastAPI types so it is testable with anext()
    - SSE headers prevent proxy/browser buffering of streamed events
"""

import asyncio
import logging
import time
from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)

# ADR: without these, nginx (X-Accel-Buffering) and browsers (Cache-Control)
# may batch small chunks before delivering them to the client.
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}

KEEPALIVE_FRAME = ": ping\n\n"


def sse_event(event: str, data: str) -> str:
    """Format one named SSE event. Multi-line data becomes multiple data lines."""
    lines = "".join(f"data: {line}\n" for line in data.split("\n"))
    return f"event: {event}\n{lines}\n"


async def endpoint_event_stream(
    message_path: str,
    keepalive_seconds: float = 15.0,
    max_duration_seconds: float | None = None,
) -> AsyncIterator[str]:
    """Announce message_path, then hold the channel open with keep-alives."""
    yield sse_event("endpoint", message_path)

    deadline = None
    if max_duration_seconds is not None:
        deadline = time.monotonic() + max_duration_seconds
    try:
        while True:
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= keepalive_seconds:
                    await asyncio.sleep(max(remaining, 0))
                    logger.info("Event stream reached max duration, closing")
                    return
            await asyncio.sleep(keepalive_seconds)
            yield KEEPALIVE_FRAME
    except asyncio.CancelledError:
        logger.info("Event stream cancelled by host")
        return
