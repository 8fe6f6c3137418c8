"""
Routes module - contains all API route handlers
"""

from .podcast import router as podcast_router
from .chat import router as chat_router
from .insight import router as insight_router
from .history import router as history_router
from .api_configs import router as api_configs_router
from .settings import router as settings_router

__all__ = [
    "podcast_router",
    "chat_router",
    "insight_router",
    "history_router",
    "api_configs_router",
    "settings_router",
]
