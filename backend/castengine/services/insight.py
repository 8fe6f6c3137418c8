"""
Text insight

Detects the language of a piece of text and streams a six-section analysis
of it from the active text model. The finished analysis is kept in the
learning history.
"""

import asyncio
from typing import List, Optional

from langdetect import DetectorFactory, detect
from langdetect.lang_detect_exception import LangDetectException

from castengine.core import get_logger
from castengine.core.exceptions import CastEngineError, TranscriptionFailedError
from castengine.models import (
    InsightChunk,
    Message,
    QuerySource,
    SaveQueryRequest,
    StreamChunk,
    StreamChunkType,
)
from castengine.services.events import CallbackSink, EventSink, safe_notify
from castengine.services.learning_records import UNKNOWN_LANGUAGE, LearningRecordService
from castengine.services.llm import ChatClient

logger = get_logger(__name__, component="text_insight")

# langdetect is probabilistic; a fixed seed makes repeated calls agree
DetectorFactory.seed = 0

ANALYSIS_SYSTEM_PROMPT = """You are a language analysis assistant. Analyze the given text and provide a structured response with exactly these six sections, each on its own line prefixed by the section tag:

[ORIGINAL] The original text as-is
[WORD_BY_WORD] Word-by-word or character-by-character explanation with meanings
[STRUCTURE] Grammatical structure analysis (sentence patterns, parts of speech)
[TRANSLATION] Accurate translation to the user's target language
[COLLOQUIAL] A more colloquial/conversational version of the same meaning
[SIMPLIFIED] A simplified version using easier vocabulary

Keep each section concise but informative. Output all six sections in order.
Do not add any extra commentary outside the section tags."""


def detect_language(text: str) -> str:
    """
    Best-guess language code of `text`, e.g. "en", "zh", "ja".

    Regional variants are folded into the base code ("zh-cn" -> "zh").
    Text without letters yields "unknown".
    """
    try:
        code = detect(text)
    except LangDetectException:
        return UNKNOWN_LANGUAGE
    return code.split("-")[0].lower()


def ensure_text(text: str) -> None:
    if not text.strip():
        raise TranscriptionFailedError("Empty text provided")


def build_analysis_prompt(
    text: str,
    detected_language: str,
    target_language: Optional[str] = None,
) -> List[Message]:
    lines = [f"Detected language: {detected_language}"]
    if target_language:
        lines.append(f"Target language: {target_language}")
    user = "\n".join(lines) + f"\n\nText to analyze:\n{text}"
    return [Message.system(ANALYSIS_SYSTEM_PROMPT), Message.user(user)]


class TextInsightService:
    """Streams text analyses and records them

    Usage:
        service = TextInsightService(records)
        analysis = await service.analyze(text, resolver.chat_client(), sink)
    """

    def __init__(self, records: Optional[LearningRecordService] = None):
        self.records = records

    async def analyze(
        self,
        text: str,
        client: ChatClient,
        sink: Optional[EventSink] = None,
        target_language: Optional[str] = None,
    ) -> str:
        """
        Stream the analysis of `text` into `sink` as InsightChunks.

        The sink sees one `start` carrying the detected language, then the
        model's `delta` chunks, then exactly one of `done` / `error`.

        Returns:
            The full analysis text

        Raises:
            TranscriptionFailedError: If `text` is blank, before any event
            CastEngineError: Classified model failure, after the `error` event
        """
        ensure_text(text)
        language = detect_language(text)
        safe_notify(sink, InsightChunk(StreamChunkType.START, language=language))

        parts: List[str] = []

        def forward(chunk: StreamChunk) -> None:
            if chunk.chunk_type == StreamChunkType.START:
                return
            if chunk.chunk_type == StreamChunkType.DELTA and chunk.content:
                parts.append(chunk.content)
            safe_notify(sink, InsightChunk(chunk.chunk_type, chunk.content))

        messages = build_analysis_prompt(text, language, target_language)
        await client.stream_chat(messages, CallbackSink(forward))

        analysis = "".join(parts)
        logger.info(
            "Text analysis finished",
            extra={"language": language, "input_chars": len(text), "analysis_chars": len(analysis)},
        )
        await self._record(text, language, analysis)
        return analysis

    async def _record(self, text: str, language: str, analysis: str) -> None:
        if self.records is None:
            return
        request = SaveQueryRequest(
            input_text=text,
            source=QuerySource.TEXT_INSIGHT,
            detected_language=language,
            analysis_result=analysis,
        )
        try:
            await asyncio.to_thread(self.records.save_query, request)
        except CastEngineError as exc:
            # the analysis has already been delivered
            logger.warning("Failed to record text analysis", extra={"error": str(exc)})
