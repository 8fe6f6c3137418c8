"""
Incremental Server-Sent-Events delta parser

Turns a chat-completion response body, delivered in arbitrary byte chunks,
into the text fragments the model produced. Chunk boundaries need not line
up with event boundaries or even with UTF-8 character boundaries.

Two payload grammars are supported:
    - OpenAI-compatible: `data: {"choices":[{"delta":{"content":"..."}}]}`,
      terminated by `data: [DONE]`
    - Anthropic: `data: {"type":"content_block_delta","delta":{"text":"..."}}`
"""

import codecs
import json
from enum import Enum
from typing import AsyncIterator, List, Optional

EVENT_DELIMITER = "\n\n"
DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


class DeltaFormat(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


def parse_openai_delta(data: str) -> Optional[str]:
    try:
        payload = json.loads(data)
        content = payload["choices"][0]["delta"]["content"]
    except (ValueError, KeyError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) else None


def parse_anthropic_delta(data: str) -> Optional[str]:
    try:
        payload = json.loads(data)
        if payload.get("type") != "content_block_delta":
            return None
        text = payload["delta"]["text"]
    except (ValueError, KeyError, TypeError, AttributeError):
        return None
    return text if isinstance(text, str) else None


class StreamDeltaParser:
    """Stateful buffer that extracts text fragments from an SSE byte stream.

    Usage:
        parser = StreamDeltaParser(DeltaFormat.OPENAI)
        for chunk in body_chunks:
            for fragment in parser.feed(chunk):
                forward(fragment)
        for fragment in parser.flush():
            forward(fragment)

    Malformed payloads are skipped silently. After an OpenAI `[DONE]` event
    `done` is True and any further input is ignored.
    """

    def __init__(self, delta_format: DeltaFormat = DeltaFormat.OPENAI):
        self.delta_format = DeltaFormat(delta_format)
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self.done = False

    def feed(self, chunk: bytes) -> List[str]:
        """Append a chunk and return the fragments of every completed event"""
        if self.done:
            return []
        self._append(self._decoder.decode(chunk))

        fragments: List[str] = []
        while not self.done:
            pos = self._buffer.find(EVENT_DELIMITER)
            if pos < 0:
                break
            block = self._buffer[:pos]
            self._buffer = self._buffer[pos + len(EVENT_DELIMITER):]
            fragments.extend(self._parse_event(block))
        return fragments

    def flush(self) -> List[str]:
        """Parse whatever is left once the body has ended.

        Some servers close the connection without terminating the last event.
        """
        if self.done:
            return []
        self._append(self._decoder.decode(b"", final=True))
        block, self._buffer = self._buffer, ""
        if not block.strip():
            return []
        return self._parse_event(block)

    def _append(self, text: str) -> None:
        # CRLF-delimited streams are normalised so "\r\n\r\n" ends an event too
        self._buffer = (self._buffer + text).replace("\r\n", "\n")

    def _parse_event(self, block: str) -> List[str]:
        fragments: List[str] = []
        for line in block.split("\n"):
            if not line.startswith(DATA_PREFIX):
                continue
            data = line[len(DATA_PREFIX):]

            if self.delta_format is DeltaFormat.OPENAI:
                if data.strip() == DONE_SENTINEL:
                    self.done = True
                    self._buffer = ""
                    break
                fragment = parse_openai_delta(data)
            else:
                fragment = parse_anthropic_delta(data)

            if fragment is not None:
                fragments.append(fragment)
        return fragments


async def iter_deltas(
    chunks: AsyncIterator[bytes],
    delta_format: DeltaFormat = DeltaFormat.OPENAI,
) -> AsyncIterator[str]:
    """Lazily yield text fragments from an async stream of body chunks"""
    parser = StreamDeltaParser(delta_format)
    async for chunk in chunks:
        for fragment in parser.feed(chunk):
            yield fragment
        if parser.done:
            return
    for fragment in parser.flush():
        yield fragment


def collect_deltas(chunks: List[bytes], delta_format: DeltaFormat = DeltaFormat.OPENAI) -> List[str]:
    """Parse a fully buffered body; convenient for tests and replays"""
    parser = StreamDeltaParser(delta_format)
    fragments: List[str] = []
    for chunk in chunks:
        fragments.extend(parser.feed(chunk))
    fragments.extend(parser.flush())
    return fragments
