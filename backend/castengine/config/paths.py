"""
Paths configuration

Centralized directory paths for the application. Every path can be
overridden through the environment.
"""

from pathlib import Path

from castengine.core.runtime import env_path

# Base directories
PACKAGE_DIR = Path(__file__).parent.parent
BACKEND_DIR = PACKAGE_DIR.parent
DATA_DIR = env_path("CASTENGINE_DATA_DIR", BACKEND_DIR / "data")
CACHE_DIR = env_path("CASTENGINE_CACHE_DIR", BACKEND_DIR / "cache")

# Generated audio: temp output of each run, saved copies promoted by the user
TEMP_AUDIO_DIR = env_path("TEMP_AUDIO_DIR", CACHE_DIR / "audio" / "temp")
SAVED_AUDIO_DIR = env_path("SAVED_AUDIO_DIR", DATA_DIR / "audio" / "saved")

# Provider configuration rows, settings and the development secret store
CONFIG_DATA_DIR = env_path("CONFIG_DATA_DIR", DATA_DIR / "config")

__all__ = [
    "PACKAGE_DIR",
    "BACKEND_DIR",
    "DATA_DIR",
    "CACHE_DIR",
    "TEMP_AUDIO_DIR",
    "SAVED_AUDIO_DIR",
    "CONFIG_DATA_DIR",
]
