"""
Data models: pydantic API schemas and frozen value types
"""

from .chat import (
    Role,
    Message,
    StreamChunk,
    StreamChunkType,
    ChatMessageIn,
    ChatStreamRequest,
)
from .podcast import (
    PodcastSource,
    SpeedMode,
    PodcastMode,
    PodcastInput,
    PodcastOptions,
    GeneratePodcastRequest,
    SavePodcastRequest,
    SavePodcastResponse,
    ProgressStage,
    ProgressEvent,
)
from .providers import (
    ApiProvider,
    ModelType,
    ProviderConfig,
    ApiConfig,
    ConnectionTestResponse,
)
from .history import (
    QuerySource,
    QueryRecord,
    PodcastRecord,
    WordFrequency,
    SaveQueryRequest,
    SavePodcastRecordRequest,
)
from .insight import TextInsightRequest, InsightChunk

__all__ = [
    "Role",
    "Message",
    "StreamChunk",
    "StreamChunkType",
    "ChatMessageIn",
    "ChatStreamRequest",
    "PodcastSource",
    "SpeedMode",
    "PodcastMode",
    "PodcastInput",
    "PodcastOptions",
    "GeneratePodcastRequest",
    "SavePodcastRequest",
    "SavePodcastResponse",
    "ProgressStage",
    "ProgressEvent",
    "ApiProvider",
    "ModelType",
    "ProviderConfig",
    "ApiConfig",
    "ConnectionTestResponse",
    "QuerySource",
    "QueryRecord",
    "PodcastRecord",
    "WordFrequency",
    "SaveQueryRequest",
    "SavePodcastRecordRequest",
    "TextInsightRequest",
    "InsightChunk",
]
