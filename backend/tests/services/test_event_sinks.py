"""
Tests for the event sinks
"""

import asyncio

import pytest

from castengine.services.events import (
    CallbackSink,
    QueueSink,
    RecordingSink,
    safe_notify,
)


def test_recording_sink_keeps_order():
    """Events are kept in delivery order"""
    sink = RecordingSink()
    for i in range(3):
        sink.notify(i)

    assert sink.events == [0, 1, 2]


def test_callback_sink():
    """The callable receives each event"""
    seen = []
    CallbackSink(seen.append).notify("event")

    assert seen == ["event"]


@pytest.mark.asyncio
async def test_queue_sink():
    """Events land on the queue a streaming response drains"""
    queue = asyncio.Queue()
    QueueSink(queue).notify("a")

    assert await queue.get() == "a"


def test_safe_notify_swallows_sink_failures():
    """A broken sink or no sink at all never raises into the producer"""
    def broken(event):
        raise RuntimeError("window closed")

    safe_notify(CallbackSink(broken), "event")
    safe_notify(None, "event")
