"""
Application configuration and settings
"""

import os

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from castengine.core.runtime import env_float, env_int

from .paths import (
    PACKAGE_DIR,
    BACKEND_DIR,
    DATA_DIR,
    CACHE_DIR,
    TEMP_AUDIO_DIR,
    SAVED_AUDIO_DIR,
    CONFIG_DATA_DIR,
)
from .settings import AppSettings, SettingsStore

# API settings
API_TITLE = "CastEngine API"
API_DESCRIPTION = "Turn any text into a language-learning podcast using pluggable LLM and TTS providers"
API_VERSION = "1.0.0"

# CORS origins
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:1420,http://localhost:3000,http://localhost:5173",
    ).split(",")
    if origin.strip()
]

# HTTP client timeouts (seconds)
CONNECTION_TEST_TIMEOUT = env_float("CONNECTION_TEST_TIMEOUT", 10.0, 1.0)
CHAT_TIMEOUT = env_float("CHAT_TIMEOUT", 60.0, 1.0)
SPEECH_TIMEOUT = env_float("SPEECH_TIMEOUT", 120.0, 1.0)

# Retry backoff (milliseconds); the retry count itself is a user setting
RETRY_BASE_DELAY_MS = env_int("RETRY_BASE_DELAY_MS", 500, 0)
RETRY_MAX_DELAY_MS = env_int("RETRY_MAX_DELAY_MS", 30_000, 0)

# Anthropic requires max_tokens on every request
ANTHROPIC_MAX_TOKENS = env_int("ANTHROPIC_MAX_TOKENS", 4096, 1)

__all__ = [
    "PACKAGE_DIR",
    "BACKEND_DIR",
    "DATA_DIR",
    "CACHE_DIR",
    "TEMP_AUDIO_DIR",
    "SAVED_AUDIO_DIR",
    "CONFIG_DATA_DIR",
    "AppSettings",
    "SettingsStore",
    "API_TITLE",
    "API_DESCRIPTION",
    "API_VERSION",
    "CORS_ORIGINS",
    "CONNECTION_TEST_TIMEOUT",
    "CHAT_TIMEOUT",
    "SPEECH_TIMEOUT",
    "RETRY_BASE_DELAY_MS",
    "RETRY_MAX_DELAY_MS",
    "ANTHROPIC_MAX_TOKENS",
]
