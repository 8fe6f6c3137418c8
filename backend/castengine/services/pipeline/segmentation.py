"""
Script segmentation for per-segment synthesis
"""

from typing import List

PREVIEW_CHARS = 200
ELLIPSIS = "…"


def _split_trimmed(text: str, delimiter: str) -> List[str]:
    return [part.strip() for part in text.split(delimiter) if part.strip()]


def split_script_segments(script: str) -> List[str]:
    """
    Split a generated script into synthesis segments.

    Paragraphs (blank-line separated) are preferred. A script with fewer than
    two paragraphs is split per line instead; a script with no non-empty line
    becomes a single segment.

    Examples:
        >>> split_script_segments("A\\n\\nB")
        ['A', 'B']
        >>> split_script_segments("A\\nB")
        ['A', 'B']
        >>> split_script_segments("   ")
        ['']
    """
    segments = _split_trimmed(script, "\n\n")
    if len(segments) >= 2:
        return segments

    segments = _split_trimmed(script, "\n")
    if segments:
        return segments
    return [script.strip()]


def make_preview(script: str, limit: int = PREVIEW_CHARS) -> str:
    """First `limit` characters, with an ellipsis when truncated"""
    if len(script) > limit:
        return script[:limit] + ELLIPSIS
    return script
