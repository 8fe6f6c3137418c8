"""
Podcast generation models

Request/response schemas for the podcast pipeline and the progress events
it reports.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class PodcastSource(str, Enum):
    """Where the podcast content came from"""
    TEXT_INSIGHT = "text_insight"
    VISION_CAPTURE = "vision_capture"
    CUSTOM = "custom"


class SpeedMode(str, Enum):
    """Pace axis of the generated script and the synthesized audio"""
    SLOW = "slow"
    NORMAL = "normal"

    @property
    def tts_speed(self) -> float:
        return 0.75 if self is SpeedMode.SLOW else 1.0


class PodcastMode(str, Enum):
    """Language axis of the generated script"""
    BILINGUAL = "bilingual"
    IMMERSIVE = "immersive"


class PodcastInput(BaseModel):
    content: str
    source: PodcastSource = PodcastSource.CUSTOM


class PodcastOptions(BaseModel):
    speed: SpeedMode = SpeedMode.NORMAL
    mode: PodcastMode = PodcastMode.BILINGUAL
    target_language: str = "en"


class GeneratePodcastRequest(BaseModel):
    """Request to generate a podcast; progress is streamed back as SSE"""
    input: PodcastInput
    options: PodcastOptions = Field(default_factory=PodcastOptions)


class SavePodcastRequest(BaseModel):
    temp_path: str


class SavePodcastResponse(BaseModel):
    path: str


class ProgressStage(str, Enum):
    """Pipeline stages, in the only order they may be reported"""
    SCRIPT_GENERATING = "script_generating"
    SCRIPT_DONE = "script_done"
    SYNTHESIS_PROGRESS = "tts_progress"
    DONE = "done"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (ProgressStage.DONE, ProgressStage.ERROR)


@dataclass(frozen=True)
class ProgressEvent:
    """One progress notification of a pipeline run"""
    stage: ProgressStage
    percent: Optional[int] = None
    preview: Optional[str] = None
    output_ref: Optional[str] = None
    error: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        """Wire shape delivered to the UI; unset fields are omitted"""
        payload: Dict[str, Any] = {"type": ProgressStage(self.stage).value}
        if self.percent is not None:
            payload["progress"] = self.percent
        if self.preview is not None:
            payload["script_preview"] = self.preview
        if self.output_ref is not None:
            payload["audio_path"] = self.output_ref
        if self.error is not None:
            payload["error"] = self.error
        return payload
