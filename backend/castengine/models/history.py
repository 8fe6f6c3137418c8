"""
Learning history models

Append-only records of what the user looked up and which podcasts they
kept, plus the running word-frequency table built from the lookups.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .podcast import PodcastMode, PodcastSource, SpeedMode


class QuerySource(str, Enum):
    """Where looked-up text came from"""
    TEXT_INSIGHT = "text_insight"
    VISION_CAPTURE = "vision_capture"


class QueryRecord(BaseModel):
    id: str
    input_text: str
    source: QuerySource
    detected_language: Optional[str] = None
    analysis_result: str
    created_at: str


class PodcastRecord(BaseModel):
    id: str
    input_content: str
    source: PodcastSource
    speed_mode: SpeedMode
    podcast_mode: PodcastMode
    audio_file_path: str
    duration_seconds: Optional[int] = None
    created_at: str


class WordFrequency(BaseModel):
    """Running count of one token; `language` is the one it was first seen in"""
    word: str
    language: str
    count: int
    last_queried_at: str


class SaveQueryRequest(BaseModel):
    input_text: str
    source: QuerySource
    detected_language: Optional[str] = None
    analysis_result: str


class SavePodcastRecordRequest(BaseModel):
    input_content: str
    source: PodcastSource = PodcastSource.CUSTOM
    speed_mode: SpeedMode = SpeedMode.NORMAL
    podcast_mode: PodcastMode = PodcastMode.BILINGUAL
    audio_file_path: str
    duration_seconds: Optional[int] = Field(default=None, ge=0)

