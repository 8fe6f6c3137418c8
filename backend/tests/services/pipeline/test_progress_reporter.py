"""
Tests for ProgressReporter and the synthesis percent schedule
"""

import pytest

from castengine.models import ProgressEvent, ProgressStage
from castengine.services.events import RecordingSink
from castengine.services.pipeline.progress import ProgressReporter, synthesis_percent


class TestSynthesisPercent:

    def test_spreads_over_thirty_to_ninety(self):
        """Test synthesis progress spans 30 to 90"""
        assert [synthesis_percent(i, 3) for i in range(3)] == [50, 70, 90]

    def test_single_segment(self):
        """Test one segment jumps straight to 90"""
        assert synthesis_percent(0, 1) == 90

    def test_uses_integer_division(self):
        """Test percents are floored"""
        assert [synthesis_percent(i, 7) for i in range(7)] == [38, 47, 55, 64, 72, 81, 90]

    @pytest.mark.parametrize("total", [1, 2, 5, 13, 100])
    def test_monotonic_and_bounded(self, total):
        """Test percents never decrease and stay within 30..90"""
        percents = [synthesis_percent(i, total) for i in range(total)]

        assert percents == sorted(percents)
        assert all(30 <= p <= 90 for p in percents)

    def test_zero_total_does_not_divide_by_zero(self):
        """Test an empty segment list"""
        assert synthesis_percent(0, 0) == 90


class TestProgressReporter:

    def test_full_run_events(self):
        """Test a successful run reports stages in order"""
        sink = RecordingSink()
        reporter = ProgressReporter(sink)

        reporter.script_generating()
        reporter.script_done("preview")
        reporter.segment_done(0, 2)
        reporter.segment_done(1, 2)
        reporter.done("/tmp/a.mp3")

        assert sink.events == [
            ProgressEvent(ProgressStage.SCRIPT_GENERATING, percent=0),
            ProgressEvent(ProgressStage.SCRIPT_DONE, percent=30, preview="preview"),
            ProgressEvent(ProgressStage.SYNTHESIS_PROGRESS, percent=60),
            ProgressEvent(ProgressStage.SYNTHESIS_PROGRESS, percent=90),
            ProgressEvent(ProgressStage.DONE, percent=100, output_ref="/tmp/a.mp3"),
        ]
        assert reporter.finished is True
        assert reporter.last_percent == 100

    def test_nothing_after_terminal_event(self):
        """Test events after done or error are dropped"""
        sink = RecordingSink()
        reporter = ProgressReporter(sink)

        reporter.script_generating()
        reporter.error("Network timeout: slow")
        reporter.done("/tmp/late.mp3")
        reporter.error("again")

        assert [e.stage for e in sink.events] == [ProgressStage.SCRIPT_GENERATING, ProgressStage.ERROR]
        assert sink.events[-1].error == "Network timeout: slow"

    def test_error_keeps_last_percent(self):
        """Test the error event carries the last reported percent"""
        reporter = ProgressReporter(RecordingSink())
        reporter.script_done("p")
        reporter.error("boom")

        assert reporter.last_percent == 30

    def test_without_sink(self):
        """Test reporting without a sink"""
        reporter = ProgressReporter(None)
        reporter.script_generating()
        reporter.done("x")

        assert reporter.finished is True

    def test_failing_sink_is_tolerated(self):
        """Test a raising sink does not break reporting"""
        class BrokenSink:
            def notify(self, event):
                raise ConnectionError("closed")

        reporter = ProgressReporter(BrokenSink())
        reporter.script_generating()
        reporter.done("x")

        assert reporter.finished is True


class TestProgressEventPayload:

    def test_progress_payload(self):
        """Test the progress wire shape"""
        event = ProgressEvent(ProgressStage.SYNTHESIS_PROGRESS, percent=70)

        assert event.to_payload() == {"type": "tts_progress", "progress": 70}

    def test_done_payload(self):
        """Test the done wire shape carries the audio path"""
        event = ProgressEvent(ProgressStage.DONE, percent=100, output_ref="/a.mp3")

        assert event.to_payload() == {"type": "done", "progress": 100, "audio_path": "/a.mp3"}

    def test_error_payload(self):
        """Test the error wire shape"""
        assert ProgressEvent(ProgressStage.ERROR, error="x").to_payload() == {"type": "error", "error": "x"}
