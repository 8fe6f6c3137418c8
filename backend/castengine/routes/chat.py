"""
Chat streaming route
"""

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from ..models import ChatStreamRequest
from ..services.pipeline import ClientResolver
from ..services.registry import get_client_resolver
from .streaming import SSE_HEADERS, stream_events

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("/stream")
async def stream_chat(
    request: ChatStreamRequest,
    resolver: ClientResolver = Depends(get_client_resolver),
):
    """Stream a completion from the active text model as start/delta/done|error events

    A missing text model is reported as a plain JSON error before the stream opens.
    """
    messages = request.to_messages()
    client = resolver.chat_client()

    async def produce(sink):
        await client.stream_chat(messages, sink)

    return StreamingResponse(
        stream_events(produce),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
