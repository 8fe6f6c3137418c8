"""
Podcast generation routes.

Generation is streamed: the response is an SSE feed of progress events that
ends with a `done` event carrying the temp audio path, or an `error` event.
"""

import asyncio
from pathlib import Path
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from ..config import AppSettings
from ..models import GeneratePodcastRequest, SavePodcastRequest, SavePodcastResponse
from ..services.pipeline import ClientResolver, PodcastPipeline, promote
from ..services.registry import (
    get_client_resolver,
    get_saved_audio_dir,
    get_settings,
    get_temp_audio_dir,
)
from ..services.storage import clear_directory, evict
from .streaming import SSE_HEADERS, stream_events

router = APIRouter(prefix="/podcast", tags=["podcast"])


@router.post("/generate")
async def generate_podcast(
    request: GeneratePodcastRequest,
    resolver: ClientResolver = Depends(get_client_resolver),
    temp_dir: Path = Depends(get_temp_audio_dir),
):
    """Generate a podcast, streaming progress events"""
    pipeline = PodcastPipeline(resolver, temp_dir)

    async def produce(sink):
        await pipeline.generate(request.input, request.options, sink)

    return StreamingResponse(
        stream_events(produce),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.post("/save", response_model=SavePodcastResponse)
async def save_podcast(
    request: SavePodcastRequest,
    saved_dir: Path = Depends(get_saved_audio_dir),
):
    """Copy a generated temp file into the saved audio directory"""
    path = await asyncio.to_thread(promote, request.temp_path, saved_dir)
    return SavePodcastResponse(path=path)


@router.post("/cleanup/temp")
async def cleanup_temp_audio(temp_dir: Path = Depends(get_temp_audio_dir)) -> Dict[str, Any]:
    """Delete every temp audio file"""
    return await asyncio.to_thread(clear_directory, temp_dir)


@router.post("/cleanup/saved")
async def cleanup_saved_audio(
    saved_dir: Path = Depends(get_saved_audio_dir),
    settings: AppSettings = Depends(get_settings),
) -> Dict[str, Any]:
    """Evict saved audio by the configured age and size limits"""
    return await asyncio.to_thread(
        evict, saved_dir, settings.cache_max_bytes, settings.cache_auto_clean_days
    )
