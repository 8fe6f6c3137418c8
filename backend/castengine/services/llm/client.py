"""
Chat client

Unified text-generation client over every configured provider. One client
is built per command invocation from a frozen ProviderConfig and RetryPolicy.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Sequence

import httpx

from castengine.config import CHAT_TIMEOUT
from castengine.core import get_logger
from castengine.core.exceptions import ModelUnavailableError, NetworkTimeoutError
from castengine.models import Message, ProviderConfig, StreamChunk, StreamChunkType
from castengine.services.events import EventSink, safe_notify
from castengine.services.http_errors import classify_chat_transport
from castengine.services.retry import RetryPolicy

from .base import ChatProtocol
from .factory import get_chat_protocol
from .streaming import iter_deltas

logger = get_logger(__name__, component="chat_client")


class ChatClient:
    """Non-streaming and streaming chat completions with classified failures

    Usage:
        client = ChatClient(config, RetryPolicy(max_retries=3))
        text = await client.chat([Message.system("..."), Message.user("...")])
    """

    def __init__(
        self,
        config: ProviderConfig,
        retry_policy: Optional[RetryPolicy] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = CHAT_TIMEOUT,
        protocol: Optional[ChatProtocol] = None,
    ):
        """
        Args:
            config: Endpoint configuration
            retry_policy: Backoff policy for `chat`; defaults to RetryPolicy()
            http_client: Shared AsyncClient; when omitted a client is opened per call
            timeout: Request timeout in seconds for per-call clients
            protocol: Wire-format strategy override; chosen from the provider otherwise
        """
        self.config = config
        self.retry_policy = retry_policy or RetryPolicy()
        self.timeout = timeout
        self.protocol = protocol or get_chat_protocol(config.provider)
        self._http_client = http_client

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            yield client

    async def chat(self, messages: Sequence[Message]) -> str:
        """Return the full completion text, retrying retryable failures

        Raises:
            CastEngineError: Classified failure of the last attempt
        """
        messages = tuple(messages)
        return await self.retry_policy.execute(lambda: self._chat_once(messages))

    async def _chat_once(self, messages: Sequence[Message]) -> str:
        request = self.protocol.build_request(self.config, messages, stream=False)

        try:
            async with self._client() as client:
                response = await client.post(request.url, json=request.json, headers=request.headers)
        except httpx.HTTPError as exc:
            raise classify_chat_transport(exc) from exc

        if not response.is_success:
            raise self.protocol.classify_status(response.status_code, response.text)

        try:
            data = response.json()
        except ValueError as exc:
            raise ModelUnavailableError(f"Invalid response: {exc}") from exc

        text = self.protocol.parse_response(data)
        logger.debug(
            "Chat completion received",
            extra={"provider": self.config.provider.value, "model": self.config.model_name, "chars": len(text)},
        )
        return text

    async def stream_chat(self, messages: Sequence[Message], sink: EventSink) -> None:
        """Stream a completion into `sink` as StreamChunk notifications

        The sink always sees `start`, then zero or more `delta`, then exactly one
        of `done` / `error`. Streams are not retried; a failure after the first
        delta cannot be replayed without duplicating text.

        Raises:
            CastEngineError: Classified failure, after the `error` notification
        """
        safe_notify(sink, StreamChunk(StreamChunkType.START))

        try:
            await self._stream_once(tuple(messages), sink)
        except Exception as exc:
            safe_notify(sink, StreamChunk(StreamChunkType.ERROR, str(exc)))
            raise

        safe_notify(sink, StreamChunk(StreamChunkType.DONE))

    async def _stream_once(self, messages: Sequence[Message], sink: EventSink) -> None:
        request = self.protocol.build_request(self.config, messages, stream=True)
        delta_count = 0

        try:
            async with self._client() as client:
                async with client.stream(
                    "POST", request.url, json=request.json, headers=request.headers
                ) as response:
                    if not response.is_success:
                        body = (await response.aread()).decode("utf-8", errors="replace")
                        raise self.protocol.classify_status(response.status_code, body)

                    try:
                        async for fragment in iter_deltas(response.aiter_bytes(), self.protocol.delta_format):
                            delta_count += 1
                            safe_notify(sink, StreamChunk(StreamChunkType.DELTA, fragment))
                    except httpx.HTTPError as exc:
                        raise NetworkTimeoutError(f"Stream error: {exc}") from exc
        except httpx.HTTPError as exc:
            raise classify_chat_transport(exc) from exc

        logger.debug(
            "Chat stream finished",
            extra={"provider": self.config.provider.value, "deltas": delta_count},
        )
