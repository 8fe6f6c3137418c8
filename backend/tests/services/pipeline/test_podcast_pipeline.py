"""
Tests for PodcastPipeline orchestration and promotion
"""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from castengine.core.exceptions import (
    GenericError,
    InvalidApiKeyError,
    ModelUnavailableError,
    StorageError,
    SynthesisFailedError,
)
from castengine.models import (
    PodcastInput,
    PodcastMode,
    PodcastOptions,
    PodcastSource,
    ProgressStage,
    SpeedMode,
)
from castengine.services.events import RecordingSink
from castengine.services.pipeline import PodcastPipeline, promote
from castengine.services.tts import TtsOptions


SCRIPT = "Welcome to the show.\n\nToday we read a poem.\n\nThanks for listening."


class FakeResolver:
    """Hands out pre-built client doubles"""

    def __init__(self, chat=None, speech=None, chat_error=None, speech_error=None):
        self.chat = chat
        self.speech = speech
        self.chat_error = chat_error
        self.speech_error = speech_error

    def chat_client(self):
        if self.chat_error:
            raise self.chat_error
        return self.chat

    def speech_client(self):
        if self.speech_error:
            raise self.speech_error
        return self.speech


@pytest.fixture
def chat():
    client = MagicMock()
    client.chat = AsyncMock(return_value=SCRIPT)
    return client


@pytest.fixture
def speech():
    client = MagicMock()
    client.synthesize = AsyncMock(side_effect=lambda text, language, options: f"<{text}>".encode())
    return client


@pytest.fixture
def temp_dir(tmp_path):
    return tmp_path / "temp_audio"


def _stages(sink):
    return [event.stage for event in sink.events]


class TestGenerate:

    @pytest.mark.asyncio
    async def test_successful_run(self, chat, speech, temp_dir):
        """Test a full run reports every stage and writes the joined audio"""
        sink = RecordingSink()
        pipeline = PodcastPipeline(FakeResolver(chat, speech), temp_dir)

        path = await pipeline.generate(
            PodcastInput(content="Ein Gedicht", source=PodcastSource.TEXT_INSIGHT),
            PodcastOptions(speed=SpeedMode.SLOW, mode=PodcastMode.IMMERSIVE, target_language="de"),
            sink,
        )

        output = Path(path)
        assert output.parent == temp_dir
        assert output.suffix == ".mp3"
        assert output.read_bytes() == b"<Welcome to the show.><Today we read a poem.><Thanks for listening.>"

        assert _stages(sink) == [
            ProgressStage.SCRIPT_GENERATING,
            ProgressStage.SCRIPT_DONE,
            ProgressStage.SYNTHESIS_PROGRESS,
            ProgressStage.SYNTHESIS_PROGRESS,
            ProgressStage.SYNTHESIS_PROGRESS,
            ProgressStage.DONE,
        ]
        assert [e.percent for e in sink.events] == [0, 30, 50, 70, 90, 100]
        assert sink.events[1].preview == SCRIPT
        assert sink.events[-1].output_ref == path

    @pytest.mark.asyncio
    async def test_speech_uses_target_language_and_pace(self, chat, speech, temp_dir):
        """Test segments are synthesized in the target language at the chosen pace"""
        pipeline = PodcastPipeline(FakeResolver(chat, speech), temp_dir)

        await pipeline.generate(
            PodcastInput(content="x"),
            PodcastOptions(speed=SpeedMode.SLOW, target_language="fr"),
        )

        speech.synthesize.assert_any_await("Welcome to the show.", "fr", TtsOptions(speed=0.75))
        assert speech.synthesize.await_count == 3

    @pytest.mark.asyncio
    async def test_chat_receives_prompt(self, chat, speech, temp_dir):
        """Test the script prompt reaches the chat client"""
        pipeline = PodcastPipeline(FakeResolver(chat, speech), temp_dir)

        await pipeline.generate(PodcastInput(content="Le chat dort."), PodcastOptions())

        messages = chat.chat.await_args.args[0]
        assert messages[-1].content == "Le chat dort."

    @pytest.mark.asyncio
    async def test_percent_is_monotonic_for_long_scripts(self, chat, speech, temp_dir):
        """Test progress never goes backwards on long scripts"""
        chat.chat = AsyncMock(return_value="\n\n".join(f"Segment {i}" for i in range(7)))
        sink = RecordingSink()

        await PodcastPipeline(FakeResolver(chat, speech), temp_dir).generate(
            PodcastInput(content="x"), PodcastOptions(), sink
        )

        percents = [e.percent for e in sink.events]
        assert percents == sorted(percents)
        assert max(e.percent for e in sink.events if e.stage == ProgressStage.SYNTHESIS_PROGRESS) == 90

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["", "   \n "])
    async def test_empty_content_reports_single_error(self, chat, speech, temp_dir, content):
        """Test blank content fails with one error event"""
        sink = RecordingSink()
        pipeline = PodcastPipeline(FakeResolver(chat, speech), temp_dir)

        with pytest.raises(GenericError):
            await pipeline.generate(PodcastInput(content=content), PodcastOptions(), sink)

        assert _stages(sink) == [ProgressStage.ERROR]
        assert sink.events[0].error == "Podcast content is empty"
        chat.chat.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_chat_config_reports_single_error(self, speech, temp_dir):
        """Test a missing text model fails with one error event"""
        sink = RecordingSink()
        resolver = FakeResolver(speech=speech, chat_error=ModelUnavailableError("No text model configured"))

        with pytest.raises(ModelUnavailableError):
            await PodcastPipeline(resolver, temp_dir).generate(PodcastInput(content="x"), PodcastOptions(), sink)

        assert _stages(sink) == [ProgressStage.ERROR]
        assert sink.events[0].error == "Model unavailable: No text model configured"

    @pytest.mark.asyncio
    async def test_missing_speech_config_fails_before_script(self, chat, temp_dir):
        """Test a missing TTS service fails before the script is generated"""
        sink = RecordingSink()
        resolver = FakeResolver(chat=chat, speech_error=SynthesisFailedError("No TTS service configured"))

        with pytest.raises(SynthesisFailedError):
            await PodcastPipeline(resolver, temp_dir).generate(PodcastInput(content="x"), PodcastOptions(), sink)

        assert _stages(sink) == [ProgressStage.ERROR]
        chat.chat.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_chat_failure_after_start(self, chat, speech, temp_dir):
        """Test a chat failure ends the run after script_generating"""
        chat.chat = AsyncMock(side_effect=InvalidApiKeyError("Authentication failed"))
        sink = RecordingSink()

        with pytest.raises(InvalidApiKeyError):
            await PodcastPipeline(FakeResolver(chat, speech), temp_dir).generate(
                PodcastInput(content="x"), PodcastOptions(), sink
            )

        assert _stages(sink) == [ProgressStage.SCRIPT_GENERATING, ProgressStage.ERROR]
        assert sink.events[-1].error == "Invalid API key: Authentication failed"
        speech.synthesize.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_synthesis_failure_mid_run_leaves_no_output(self, chat, speech, temp_dir):
        """Test a failed segment leaves no partial file behind"""
        speech.synthesize = AsyncMock(side_effect=[b"one", SynthesisFailedError("TTS server error (500)")])
        sink = RecordingSink()

        with pytest.raises(SynthesisFailedError):
            await PodcastPipeline(FakeResolver(chat, speech), temp_dir).generate(
                PodcastInput(content="x"), PodcastOptions(), sink
            )

        assert _stages(sink) == [
            ProgressStage.SCRIPT_GENERATING,
            ProgressStage.SCRIPT_DONE,
            ProgressStage.SYNTHESIS_PROGRESS,
            ProgressStage.ERROR,
        ]
        assert not temp_dir.exists() or list(temp_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_unwritable_temp_dir_is_storage_error(self, chat, speech, tmp_path):
        """Test an unwritable output location is a storage error"""
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("file in the way")
        sink = RecordingSink()

        with pytest.raises(StorageError):
            await PodcastPipeline(FakeResolver(chat, speech), blocker).generate(
                PodcastInput(content="x"), PodcastOptions(), sink
            )

        assert _stages(sink)[-1] == ProgressStage.ERROR
        assert ProgressStage.DONE not in _stages(sink)

    @pytest.mark.asyncio
    async def test_runs_get_distinct_output_files(self, chat, speech, temp_dir):
        """Test every run writes its own file"""
        pipeline = PodcastPipeline(FakeResolver(chat, speech), temp_dir)

        first = await pipeline.generate(PodcastInput(content="x"), PodcastOptions())
        second = await pipeline.generate(PodcastInput(content="x"), PodcastOptions())

        assert first != second
        assert len(list(temp_dir.iterdir())) == 2

    @pytest.mark.asyncio
    async def test_audio_is_written_off_the_event_loop(self, chat, speech, temp_dir, monkeypatch):
        """The output file is written in a worker thread, not on the loop"""
        offloaded = []
        real_to_thread = asyncio.to_thread

        async def recording_to_thread(func, *args, **kwargs):
            offloaded.append(func.__name__)
            return await real_to_thread(func, *args, **kwargs)

        monkeypatch.setattr(asyncio, "to_thread", recording_to_thread)

        path = await PodcastPipeline(FakeResolver(chat, speech), temp_dir).generate(
            PodcastInput(content="x"), PodcastOptions()
        )

        assert offloaded == ["_write_audio"]
        assert Path(path).is_file()


class TestPromote:

    def test_copies_under_same_name(self, tmp_path):
        """Test promote keeps the file name and the temp copy"""
        temp = tmp_path / "temp" / "abc.mp3"
        temp.parent.mkdir()
        temp.write_bytes(b"audio")
        saved_dir = tmp_path / "saved"

        destination = promote(str(temp), saved_dir)

        assert destination == str(saved_dir / "abc.mp3")
        assert Path(destination).read_bytes() == b"audio"
        assert temp.exists()

    def test_missing_temp_file(self, tmp_path):
        """Test promoting a missing file"""
        with pytest.raises(StorageError, match="Temp audio file not found"):
            promote(str(tmp_path / "gone.mp3"), tmp_path / "saved")

    def test_overwrites_existing_saved_file(self, tmp_path):
        """Test promote replaces an existing saved file"""
        temp = tmp_path / "a.mp3"
        temp.write_bytes(b"new")
        saved_dir = tmp_path / "saved"
        saved_dir.mkdir()
        (saved_dir / "a.mp3").write_bytes(b"old")

        promote(str(temp), saved_dir)

        assert (saved_dir / "a.mp3").read_bytes() == b"new"
