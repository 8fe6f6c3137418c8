"""
Learning records

Saves looked-up text and kept podcasts to the history repository and keeps
the word-frequency table current. Lookups are tokenized so that Latin-script
words count as a whole and CJK text counts per character.
"""

import uuid
from typing import List

from castengine.core import get_logger
from castengine.models import (
    PodcastRecord,
    QueryRecord,
    SavePodcastRecordRequest,
    SaveQueryRequest,
    WordFrequency,
)
from castengine.services.storage import HistoryRepository

logger = get_logger(__name__, component="learning_records")

UNKNOWN_LANGUAGE = "unknown"

# Ideographs, extension A, CJK punctuation, kana and Hangul syllables
CJK_RANGES = (
    (0x4E00, 0x9FFF),
    (0x3400, 0x4DBF),
    (0x3000, 0x303F),
    (0x3040, 0x309F),
    (0x30A0, 0x30FF),
    (0xAC00, 0xD7AF),
)


def is_cjk(ch: str) -> bool:
    code = ord(ch)
    return any(low <= code <= high for low, high in CJK_RANGES)


def tokenize(text: str) -> List[str]:
    """
    Split text into lowercase tokens for frequency counting.

    Runs of letters, digits, apostrophes and hyphens form one token; every CJK
    character is a token of its own; everything else separates tokens.

    Example:
        tokenize("Hello你好world") -> ["hello", "你", "好", "world"]
    """
    tokens: List[str] = []
    current: List[str] = []

    for ch in text:
        if is_cjk(ch):
            if current:
                tokens.append("".join(current))
                current = []
            tokens.append(ch)
        elif ch.isalnum() or ch in ("'", "-"):
            current.append(ch)
        elif current:
            tokens.append("".join(current))
            current = []
    if current:
        tokens.append("".join(current))

    return [token.lower() for token in tokens if token]


def page_offset(page: int, page_size: int) -> int:
    """Offset of a 1-based page; pages below 1 read as the first page"""
    return (max(page, 1) - 1) * max(page_size, 0)


class LearningRecordService:
    """Append-only learning history over a HistoryRepository

    Usage:
        records = LearningRecordService(FileBasedHistoryRepository(CONFIG_DATA_DIR))
        records.save_query(SaveQueryRequest(input_text="...", source="text_insight", analysis_result="..."))
        top = records.frequent_words(20)
    """

    def __init__(self, repository: HistoryRepository):
        self.repository = repository

    def save_query(self, request: SaveQueryRequest) -> QueryRecord:
        """Store the lookup and count its words under the detected language"""
        stored = self.repository.insert_query({
            "id": str(uuid.uuid4()),
            "input_text": request.input_text,
            "source": request.source.value,
            "detected_language": request.detected_language,
            "analysis_result": request.analysis_result,
        })

        words = tokenize(request.input_text)
        self.repository.increment_words(words, request.detected_language or UNKNOWN_LANGUAGE)

        logger.info(
            "Saved query record",
            extra={"record_id": stored["id"], "query_source": request.source.value, "words": len(words)},
        )
        return QueryRecord(**stored)

    def save_podcast(self, request: SavePodcastRecordRequest) -> PodcastRecord:
        stored = self.repository.insert_podcast({
            "id": str(uuid.uuid4()),
            "input_content": request.input_content,
            "source": request.source.value,
            "speed_mode": request.speed_mode.value,
            "podcast_mode": request.podcast_mode.value,
            "audio_file_path": request.audio_file_path,
            "duration_seconds": request.duration_seconds,
        })
        logger.info("Saved podcast record", extra={"record_id": stored["id"], "path": request.audio_file_path})
        return PodcastRecord(**stored)

    def query_history(self, page: int, page_size: int) -> List[QueryRecord]:
        rows = self.repository.list_queries(page_offset(page, page_size), page_size)
        return [QueryRecord(**row) for row in rows]

    def podcast_history(self, page: int, page_size: int) -> List[PodcastRecord]:
        rows = self.repository.list_podcasts(page_offset(page, page_size), page_size)
        return [PodcastRecord(**row) for row in rows]

    def frequent_words(self, limit: int) -> List[WordFrequency]:
        return [WordFrequency(**row) for row in self.repository.frequent_words(limit)]
