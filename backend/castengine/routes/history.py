"""
Learning history routes.

Lookups and kept podcasts are append-only; listings are newest first.
"""

import asyncio
from typing import List

from fastapi import APIRouter, Depends, Query

from ..models import (
    PodcastRecord,
    QueryRecord,
    SavePodcastRecordRequest,
    SaveQueryRequest,
    WordFrequency,
)
from ..services.learning_records import LearningRecordService
from ..services.registry import get_learning_records

router = APIRouter(prefix="/history", tags=["history"])

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@router.post("/queries", response_model=QueryRecord)
async def save_query_record(
    request: SaveQueryRequest,
    records: LearningRecordService = Depends(get_learning_records),
):
    """Record a lookup and count its words"""
    return await asyncio.to_thread(records.save_query, request)


@router.get("/queries", response_model=List[QueryRecord])
async def get_query_history(
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    records: LearningRecordService = Depends(get_learning_records),
):
    return await asyncio.to_thread(records.query_history, page, page_size)


@router.post("/podcasts", response_model=PodcastRecord)
async def save_podcast_record(
    request: SavePodcastRecordRequest,
    records: LearningRecordService = Depends(get_learning_records),
):
    """Record a podcast the user kept"""
    return await asyncio.to_thread(records.save_podcast, request)


@router.get("/podcasts", response_model=List[PodcastRecord])
async def get_podcast_history(
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    records: LearningRecordService = Depends(get_learning_records),
):
    return await asyncio.to_thread(records.podcast_history, page, page_size)


@router.get("/words", response_model=List[WordFrequency])
async def get_frequent_words(
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    records: LearningRecordService = Depends(get_learning_records),
):
    """Most frequently looked-up words"""
    return await asyncio.to_thread(records.frequent_words, limit)
