"""
Event sinks

The pipeline and the streaming chat push notifications into a sink instead
of talking to a transport. A sink only has to implement `notify(event)`.
Delivery is fire-and-forget: `safe_notify` logs and drops sink failures so a
broken UI channel never aborts the work that produced the event.
"""

import asyncio
from typing import Any, Callable, Generic, List, Optional, Protocol, TypeVar

from castengine.core import get_logger

logger = get_logger(__name__, component="events")

E = TypeVar("E")
E_contra = TypeVar("E_contra", contravariant=True)


class EventSink(Protocol[E_contra]):
    def notify(self, event: E_contra) -> None:
        ...


def safe_notify(sink: Optional[EventSink], event: Any) -> None:
    if sink is None:
        return
    try:
        sink.notify(event)
    except Exception as exc:
        logger.warning(
            "Event sink failed, dropping event",
            extra={"event_type": type(event).__name__, "error": str(exc)},
        )


class RecordingSink(Generic[E]):
    """Keeps every event in order; used by tests and synchronous callers"""

    def __init__(self) -> None:
        self.events: List[E] = []

    def notify(self, event: E) -> None:
        self.events.append(event)


class CallbackSink(Generic[E]):
    """Adapts a plain callable, e.g. a progress callback"""

    def __init__(self, callback: Callable[[E], None]):
        self.callback = callback

    def notify(self, event: E) -> None:
        self.callback(event)


class QueueSink(Generic[E]):
    """Hands events to an asyncio.Queue consumed by a streaming response"""

    def __init__(self, queue: "asyncio.Queue[E]"):
        self.queue = queue

    def notify(self, event: E) -> None:
        self.queue.put_nowait(event)

