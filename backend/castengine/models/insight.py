"""
Text insight models
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel

from .chat import StreamChunkType


class TextInsightRequest(BaseModel):
    """Text to analyze; the analysis is streamed back as SSE"""
    text: str
    target_language: Optional[str] = None


@dataclass(frozen=True)
class InsightChunk:
    """Stream notification of a text analysis; `start` carries the detected language"""
    chunk_type: StreamChunkType
    content: Optional[str] = None
    language: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": StreamChunkType(self.chunk_type).value}
        if self.content is not None:
            payload["content"] = self.content
        if self.language is not None:
            payload["language"] = self.language
        return payload
