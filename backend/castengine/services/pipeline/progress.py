"""
Progress Reporting Module

Turns pipeline milestones into ProgressEvents and hands them to a sink.
One reporter is created per pipeline run.
"""

from typing import Optional

from castengine.core import get_logger
from castengine.models import ProgressEvent, ProgressStage
from castengine.services.events import EventSink, safe_notify

logger = get_logger(__name__, component="progress_reporter")

SCRIPT_START_PERCENT = 0
SCRIPT_DONE_PERCENT = 30
SYNTHESIS_SPAN = 60
SYNTHESIS_MAX_PERCENT = 90
DONE_PERCENT = 100


def synthesis_percent(index: int, total: int) -> int:
    """Percent after segment `index` (zero-based) of `total` is synthesized"""
    pct = SCRIPT_DONE_PERCENT + ((index + 1) * SYNTHESIS_SPAN) // max(total, 1)
    return min(pct, SYNTHESIS_MAX_PERCENT)


class ProgressReporter:
    """
    Emits the events of one run in stage order

    Once a terminal event (done or error) has been emitted every further
    report is dropped, so a run never produces two terminal events.
    """

    def __init__(self, sink: Optional[EventSink], run_id: Optional[str] = None):
        self.sink = sink
        self.run_id = run_id
        self.last_percent = SCRIPT_START_PERCENT
        self.finished = False

    def _emit(self, event: ProgressEvent) -> None:
        if self.finished:
            logger.warning(
                "Dropping progress event after terminal event",
                extra={"stage": event.stage.value, "run_id": self.run_id},
            )
            return
        if event.percent is not None:
            self.last_percent = max(self.last_percent, event.percent)
        self.finished = event.stage.is_terminal

        logger.debug(
            f"[{event.stage.value}] {event.percent if event.percent is not None else '-'}%",
            extra={"stage": event.stage.value, "progress": event.percent, "run_id": self.run_id},
        )
        safe_notify(self.sink, event)

    def script_generating(self) -> None:
        self._emit(ProgressEvent(ProgressStage.SCRIPT_GENERATING, percent=SCRIPT_START_PERCENT))

    def script_done(self, preview: str) -> None:
        self._emit(ProgressEvent(ProgressStage.SCRIPT_DONE, percent=SCRIPT_DONE_PERCENT, preview=preview))

    def segment_done(self, index: int, total: int) -> None:
        self._emit(ProgressEvent(ProgressStage.SYNTHESIS_PROGRESS, percent=synthesis_percent(index, total)))

    def done(self, output_ref: str) -> None:
        self._emit(ProgressEvent(ProgressStage.DONE, percent=DONE_PERCENT, output_ref=output_ref))

    def error(self, message: str) -> None:
        self._emit(ProgressEvent(ProgressStage.ERROR, error=message))
