"""
Core Exceptions

Closed error taxonomy shared by every provider client and the pipeline.
Each failure resolves to exactly one ErrorKind; retryability is a property
of the kind alone.
"""

from enum import Enum
from typing import Dict, Type


class ErrorKind(str, Enum):
    """Every failure the backend can surface"""

    INVALID_API_KEY = "invalid_api_key"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    NETWORK_TIMEOUT = "network_timeout"
    MODEL_UNAVAILABLE = "model_unavailable"
    TRANSCRIPTION_FAILED = "transcription_failed"
    SYNTHESIS_FAILED = "synthesis_failed"
    STORAGE_ERROR = "storage_error"
    PERMISSION_DENIED = "permission_denied"
    GENERIC = "generic"

    @property
    def is_retryable(self) -> bool:
        return self in RETRYABLE_KINDS

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]


RETRYABLE_KINDS = frozenset({
    ErrorKind.NETWORK_TIMEOUT,
    ErrorKind.MODEL_UNAVAILABLE,
    ErrorKind.SYNTHESIS_FAILED,
})

_KIND_LABELS = {
    ErrorKind.INVALID_API_KEY: "Invalid API key",
    ErrorKind.INSUFFICIENT_BALANCE: "Insufficient balance",
    ErrorKind.NETWORK_TIMEOUT: "Network timeout",
    ErrorKind.MODEL_UNAVAILABLE: "Model unavailable",
    ErrorKind.TRANSCRIPTION_FAILED: "Text recognition failed",
    ErrorKind.SYNTHESIS_FAILED: "Speech synthesis failed",
    ErrorKind.STORAGE_ERROR: "Storage error",
    ErrorKind.PERMISSION_DENIED: "Permission denied",
    ErrorKind.GENERIC: "",
}


class CastEngineError(Exception):
    """Base exception for all application errors.

    Carries the taxonomy tag (`kind`) and a human-readable `detail`.
    """

    kind: ErrorKind = ErrorKind.GENERIC

    def __init__(self, detail: str = ""):
        super().__init__(detail)
        self.detail = detail

    @property
    def is_retryable(self) -> bool:
        return self.kind.is_retryable

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind.value, "detail": self.detail}

    def __str__(self) -> str:
        label = self.kind.label
        return f"{label}: {self.detail}" if label else self.detail

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.detail!r})"


class InvalidApiKeyError(CastEngineError):
    kind = ErrorKind.INVALID_API_KEY


class InsufficientBalanceError(CastEngineError):
    kind = ErrorKind.INSUFFICIENT_BALANCE


class NetworkTimeoutError(CastEngineError):
    kind = ErrorKind.NETWORK_TIMEOUT


class ModelUnavailableError(CastEngineError):
    kind = ErrorKind.MODEL_UNAVAILABLE


class TranscriptionFailedError(CastEngineError):
    kind = ErrorKind.TRANSCRIPTION_FAILED


class SynthesisFailedError(CastEngineError):
    kind = ErrorKind.SYNTHESIS_FAILED


class StorageError(CastEngineError):
    kind = ErrorKind.STORAGE_ERROR


class PermissionDeniedError(CastEngineError):
    kind = ErrorKind.PERMISSION_DENIED


class GenericError(CastEngineError):
    kind = ErrorKind.GENERIC


ERROR_CLASSES: Dict[ErrorKind, Type[CastEngineError]] = {
    cls.kind: cls
    for cls in (
        InvalidApiKeyError,
        InsufficientBalanceError,
        NetworkTimeoutError,
        ModelUnavailableError,
        TranscriptionFailedError,
        SynthesisFailedError,
        StorageError,
        PermissionDeniedError,
        GenericError,
    )
}


def error_for_kind(kind: ErrorKind, detail: str = "") -> CastEngineError:
    """Build the exception matching a taxonomy tag"""
    return ERROR_CLASSES[ErrorKind(kind)](detail)


__all__ = [
    "ErrorKind",
    "RETRYABLE_KINDS",
    "CastEngineError",
    "InvalidApiKeyError",
    "InsufficientBalanceError",
    "NetworkTimeoutError",
    "ModelUnavailableError",
    "TranscriptionFailedError",
    "SynthesisFailedError",
    "StorageError",
    "PermissionDeniedError",
    "GenericError",
    "ERROR_CLASSES",
    "error_for_kind",
]
