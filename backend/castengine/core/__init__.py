"""
Core Module - Cross-cutting concerns and shared infrastructure

Organization:
    - logging.py: Structured logging configuration and utilities
    - exceptions.py: Closed error taxonomy (ErrorKind + exception classes)
    - runtime.py: Environment parsing helpers

Usage:
    from castengine.core import get_logger, CastEngineError, ErrorKind
"""

from .logging import (
    setup_logging,
    get_logger,
    set_request_id,
    set_run_id,
    clear_context,
    LogTimer,
)

from .exceptions import (
    ErrorKind,
    RETRYABLE_KINDS,
    CastEngineError,
    InvalidApiKeyError,
    InsufficientBalanceError,
    NetworkTimeoutError,
    ModelUnavailableError,
    TranscriptionFailedError,
    SynthesisFailedError,
    StorageError,
    PermissionDeniedError,
    GenericError,
    error_for_kind,
)

from .runtime import (
    parse_bool_env,
    env_int,
    env_float,
    env_path,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "set_request_id",
    "set_run_id",
    "clear_context",
    "LogTimer",
    # Errors
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
    "error_for_kind",
    # Runtime
    "parse_bool_env",
    "env_int",
    "env_float",
    "env_path",
]
