"""
Chat message and stream chunk models
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """One turn of a conversation; order within a conversation matters"""
    role: Role
    content: str

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(Role.SYSTEM, content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(Role.USER, content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(Role.ASSISTANT, content)

    def to_dict(self) -> Dict[str, str]:
        return {"role": Role(self.role).value, "content": self.content}


class StreamChunkType(str, Enum):
    START = "start"
    DELTA = "delta"
    DONE = "done"
    ERROR = "error"


@dataclass(frozen=True)
class StreamChunk:
    """Notification delivered to a stream sink during `stream_chat`"""
    chunk_type: StreamChunkType
    content: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": StreamChunkType(self.chunk_type).value}
        if self.content is not None:
            payload["content"] = self.content
        return payload


class ChatMessageIn(BaseModel):
    role: Role
    content: str


class ChatStreamRequest(BaseModel):
    """Request to stream a completion from the active text model"""
    messages: List[ChatMessageIn]

    def to_messages(self) -> List[Message]:
        return [Message(m.role, m.content) for m in self.messages]
