"""
HTTP failure classification

Maps transport failures and non-2xx statuses onto the error taxonomy at the
client boundary, before any retry decision is made. Chat and speech
endpoints classify differently: a speech failure that is neither an auth nor
a quota problem is always a synthesis failure.
"""

import httpx

from castengine.core.exceptions import (
    CastEngineError,
    InsufficientBalanceError,
    InvalidApiKeyError,
    ModelUnavailableError,
    NetworkTimeoutError,
    SynthesisFailedError,
)

QUOTA_MARKERS = ("insufficient", "quota", "balance")


def mentions_quota(body: str) -> bool:
    lowered = body.lower()
    return any(marker in lowered for marker in QUOTA_MARKERS)


def classify_chat_status(status: int, body: str) -> CastEngineError:
    if status == 401:
        return InvalidApiKeyError(f"Authentication failed: {body}")
    if status == 403:
        return InvalidApiKeyError(f"Forbidden: {body}")
    if status in (402, 429):
        # 429 is either a hard quota problem or plain rate limiting
        if mentions_quota(body):
            return InsufficientBalanceError(f"Quota exceeded: {body}")
        return NetworkTimeoutError(f"Rate limited: {body}")
    if status == 404:
        return ModelUnavailableError(f"Model not found: {body}")
    if 500 <= status <= 599:
        return ModelUnavailableError(f"Server error ({status}): {body}")
    return ModelUnavailableError(f"HTTP {status}: {body}")


def classify_chat_transport(exc: httpx.HTTPError) -> CastEngineError:
    if isinstance(exc, httpx.TimeoutException):
        return NetworkTimeoutError(f"Request timed out: {exc}")
    if isinstance(exc, httpx.ConnectError):
        return NetworkTimeoutError(f"Connection failed: {exc}")
    return ModelUnavailableError(f"Request failed: {exc}")


def classify_speech_status(status: int, body: str) -> CastEngineError:
    if status in (401, 403):
        return InvalidApiKeyError(f"TTS auth failed: {body}")
    if status in (402, 429):
        return InsufficientBalanceError(f"TTS quota exceeded: {body}")
    if 500 <= status <= 599:
        return SynthesisFailedError(f"TTS server error ({status}): {body}")
    return SynthesisFailedError(f"TTS HTTP {status}: {body}")


def classify_speech_transport(exc: httpx.HTTPError) -> CastEngineError:
    if isinstance(exc, httpx.TimeoutException):
        return SynthesisFailedError(f"TTS request timed out: {exc}")
    if isinstance(exc, httpx.ConnectError):
        return SynthesisFailedError(f"TTS connection failed: {exc}")
    return SynthesisFailedError(f"TTS request failed: {exc}")
