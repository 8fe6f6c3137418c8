"""
Podcast pipeline package

- prompts.py: Script generation prompt (mode and pace axes)
- segmentation.py: Script splitting and preview
- progress.py: Ordered progress reporting
- podcast.py: PodcastPipeline orchestration and promotion to saved audio
"""

from .prompts import build_script_prompt
from .segmentation import split_script_segments, make_preview
from .progress import ProgressReporter, synthesis_percent
from .podcast import ClientResolver, PodcastPipeline, promote

__all__ = [
    "build_script_prompt",
    "split_script_segments",
    "make_preview",
    "ProgressReporter",
    "synthesis_percent",
    "ClientResolver",
    "PodcastPipeline",
    "promote",
]
