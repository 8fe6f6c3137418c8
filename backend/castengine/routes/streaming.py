"""
Server-Sent-Events plumbing shared by the streaming routes.

The producing coroutine writes events into a QueueSink; the response body
drains the queue until the producer has finished.
"""

import asyncio
import json
from typing import Any, AsyncIterator, Awaitable, Callable, Dict

from castengine.core import get_logger
from castengine.services.events import QueueSink

logger = get_logger(__name__, component="sse")

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
}

_END = object()


def format_sse(payload: Dict[str, Any]) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


async def stream_events(produce: Callable[[QueueSink], Awaitable[Any]]) -> AsyncIterator[str]:
    """
    Run `produce(sink)` and yield every event it emits as an SSE frame.

    The producer's own failure is expected to have been reported as an event
    already; it is logged here and not re-raised into the response.
    """
    queue: asyncio.Queue = asyncio.Queue()

    async def _run() -> None:
        try:
            await produce(QueueSink(queue))
        finally:
            queue.put_nowait(_END)

    task = asyncio.create_task(_run())
    try:
        while True:
            event = await queue.get()
            if event is _END:
                break
            yield format_sse(event.to_payload())
    finally:
        if not task.done():
            task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception as exc:
            logger.info("Streamed operation ended with error", extra={"error": str(exc)})
