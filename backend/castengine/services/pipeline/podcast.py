"""
Podcast pipeline

Content -> script (chat) -> segments -> audio per segment (speech) -> one
MP3 file in the temp audio directory. Progress is reported to a sink in a
fixed stage order; any failure ends the run with exactly one error event and
no output file.
"""

import asyncio
import shutil
import uuid
from pathlib import Path
from typing import Optional, Protocol

from castengine.core import LogTimer, get_logger, set_run_id
from castengine.core.exceptions import GenericError, StorageError
from castengine.models import PodcastInput, PodcastOptions
from castengine.services.events import EventSink
from castengine.services.llm import ChatClient
from castengine.services.tts import SpeechClient, TtsOptions

from .progress import ProgressReporter
from .prompts import build_script_prompt
from .segmentation import make_preview, split_script_segments

logger = get_logger(__name__, component="podcast_pipeline")

AUDIO_SUFFIX = ".mp3"


class ClientResolver(Protocol):
    """Builds the clients of one run from the stored provider configuration.

    `chat_client` raises ModelUnavailableError and `speech_client` raises
    SynthesisFailedError when nothing suitable is configured.
    """

    def chat_client(self) -> ChatClient:
        ...

    def speech_client(self) -> SpeechClient:
        ...


class PodcastPipeline:
    """
    Orchestrates one podcast generation per `generate` call

    Usage:
        pipeline = PodcastPipeline(resolver, TEMP_AUDIO_DIR)
        temp_path = await pipeline.generate(podcast_input, options, sink)
    """

    def __init__(self, resolver: ClientResolver, temp_dir: Path):
        self.resolver = resolver
        self.temp_dir = Path(temp_dir)

    async def generate(
        self,
        podcast_input: PodcastInput,
        options: PodcastOptions,
        sink: Optional[EventSink] = None,
    ) -> str:
        """
        Run the full pipeline

        Args:
            podcast_input: Content to turn into a podcast
            options: Pace, mode and target language
            sink: Receives ProgressEvents

        Returns:
            Path of the generated temp MP3 file

        Raises:
            CastEngineError: The failure that ended the run, after the error event
        """
        run_id = str(uuid.uuid4())
        set_run_id(run_id)
        reporter = ProgressReporter(sink, run_id=run_id)

        try:
            with LogTimer(logger, f"podcast generation {run_id[:8]}"):
                return await self._run(podcast_input, options, reporter)
        except Exception as exc:
            reporter.error(str(exc))
            raise

    async def _run(
        self,
        podcast_input: PodcastInput,
        options: PodcastOptions,
        reporter: ProgressReporter,
    ) -> str:
        if not podcast_input.content.strip():
            raise GenericError("Podcast content is empty")

        chat = self.resolver.chat_client()
        speech = self.resolver.speech_client()

        reporter.script_generating()
        script = await chat.chat(build_script_prompt(podcast_input, options))
        reporter.script_done(make_preview(script))

        segments = split_script_segments(script)
        total = len(segments)
        logger.info(
            f"Script split into {total} segments",
            extra={"segments": total, "script_chars": len(script), "source": podcast_input.source.value},
        )

        tts_options = TtsOptions(speed=options.speed.tts_speed)
        audio = bytearray()
        for index, segment in enumerate(segments):
            audio.extend(await speech.synthesize(segment, options.target_language, tts_options))
            reporter.segment_done(index, total)

        output_path = await asyncio.to_thread(self._write_audio, bytes(audio))
        reporter.done(str(output_path))
        return str(output_path)

    def _write_audio(self, audio: bytes) -> Path:
        output_path = self.temp_dir / f"{uuid.uuid4()}{AUDIO_SUFFIX}"
        try:
            self.temp_dir.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(audio)
        except OSError as exc:
            raise StorageError(f"Failed to write audio file: {exc}") from exc

        logger.info("Podcast audio written", extra={"path": str(output_path), "audio_bytes": len(audio)})
        return output_path


def promote(temp_path: str, saved_dir: Path) -> str:
    """
    Copy a temp output into the saved directory under the same filename.

    The temp file is left in place.

    Raises:
        StorageError: If the temp file is missing or the copy fails
    """
    source = Path(temp_path)
    if not source.is_file():
        raise StorageError(f"Temp audio file not found: {temp_path}")

    saved_dir = Path(saved_dir)
    destination = saved_dir / source.name
    try:
        saved_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)
    except OSError as exc:
        raise StorageError(f"Failed to copy audio to saved dir: {exc}") from exc

    logger.info("Podcast saved", extra={"source": str(source), "destination": str(destination)})
    return str(destination)
