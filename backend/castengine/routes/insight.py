"""
Text insight route
"""

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from ..models import TextInsightRequest
from ..services.insight import TextInsightService, ensure_text
from ..services.pipeline import ClientResolver
from ..services.registry import get_client_resolver, get_insight_service
from .streaming import SSE_HEADERS, stream_events

router = APIRouter(prefix="/insight", tags=["insight"])


@router.post("/analyze")
async def analyze_text(
    request: TextInsightRequest,
    resolver: ClientResolver = Depends(get_client_resolver),
    service: TextInsightService = Depends(get_insight_service),
):
    """Stream a six-section analysis of the text as start/delta/done|error events

    Blank text and a missing text model are plain JSON errors; the stream
    only opens once both are ruled out.
    """
    ensure_text(request.text)
    client = resolver.chat_client()

    async def produce(sink):
        await service.analyze(request.text, client, sink, request.target_language)

    return StreamingResponse(
        stream_events(produce),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
