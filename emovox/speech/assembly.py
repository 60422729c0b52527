"""Speech assembly — segment, synthesize concurrently, stitch one WAV.

Flow::

    text ─► segment() ─► SegmentSynthesizer ×N (bounded, concurrent)
         ─► buffers in segment order ─► concatenate ─► wav.encode ─► data URI

All-or-nothing: any segment failure cancels the siblings and no audio is
returned.
"""

from __future__ import annotations

import asyncio
import logging

from emovox.config import Settings
from emovox.errors import FormatMismatch, InvalidInput, SynthesisFailure
from emovox.speech import wav
from emovox.speech.base import SpeechCapability
from emovox.speech.catalog import check_voice
from emovox.speech.envelope import to_data_uri
from emovox.speech.segmenter import Segment, segment
from emovox.speech.synthesizer import SegmentSynthesizer

logger = logging.getLogger(__name__)


class SpeechAssembler:
    """Turns annotated text into one WAV container via a speech capability."""

    def __init__(self, capability: SpeechCapability, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self.synthesizer = SegmentSynthesizer(
            capability,
            model=self.settings.tts_model,
            default_sample_rate=self.settings.default_sample_rate,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def generate_speech(self, text: str, voice: str) -> str:
        """Return the assembled audio as a ``data:audio/wav;base64,...`` URI."""
        container = await self.assemble(text, voice)
        return to_data_uri(container, wav.WAV_MIME_TYPE)

    async def assemble(self, text: str, voice: str) -> bytes:
        """Return the assembled audio as WAV container bytes."""
        segments = self.prepare(text, voice)
        buffers = await self.synthesize_all(segments, voice)
        combined = self.concatenate(buffers)
        logger.info(
            "Assembled %d segment(s): %.2fs @ %d Hz",
            len(segments),
            combined.duration,
            combined.format.sample_rate,
        )
        return wav.encode(combined.format, combined.samples)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def prepare(self, text: str, voice: str) -> list[Segment]:
        """Validate the request and split it into segments."""
        stripped = (text or "").strip()
        if len(stripped) < self.settings.min_text_chars:
            raise InvalidInput(
                f"Text must be at least {self.settings.min_text_chars} characters long."
            )
        if len(stripped) > self.settings.max_text_chars:
            raise InvalidInput(
                f"Text must be at most {self.settings.max_text_chars} characters long."
            )
        if not (voice or "").strip():
            raise InvalidInput("A voice must be specified.")
        check_voice(voice)

        segments = segment(stripped)
        if not segments:
            raise InvalidInput("Text contains no speakable content.")
        logger.info(
            "Parsed %d segment(s): %s",
            len(segments),
            ", ".join(s.expression for s in segments),
        )
        return segments

    async def synthesize_all(self, segments: list[Segment], voice: str) -> list[wav.RawAudioBuffer]:
        """Synthesize every segment; results come back in segment order.

        The first failure cancels the in-flight siblings and is re-raised.
        """
        semaphore = asyncio.Semaphore(self.settings.max_concurrency)
        tasks = [
            asyncio.create_task(self._synthesize_one(seg, voice, semaphore))
            for seg in segments
        ]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _synthesize_one(
        self, seg: Segment, voice: str, semaphore: asyncio.Semaphore
    ) -> wav.RawAudioBuffer:
        async with semaphore:
            try:
                return await asyncio.wait_for(
                    self.synthesizer.synthesize(seg, voice),
                    timeout=self.settings.segment_timeout,
                )
            except asyncio.TimeoutError as exc:
                raise SynthesisFailure(
                    seg.text, f"timed out after {self.settings.segment_timeout:g}s"
                ) from exc

    @staticmethod
    def concatenate(buffers: list[wav.RawAudioBuffer]) -> wav.RawAudioBuffer:
        """Join buffers in order; every buffer must share one format."""
        if not buffers:
            raise InvalidInput("Text contains no speakable content.")
        expected = buffers[0].format
        for index, buf in enumerate(buffers[1:], start=1):
            if buf.format != expected:
                raise FormatMismatch(
                    f"Segment {index} is {buf.format.channels}ch/{buf.format.sample_rate}Hz/"
                    f"{buf.format.bits_per_sample}bit but segment 0 is "
                    f"{expected.channels}ch/{expected.sample_rate}Hz/{expected.bits_per_sample}bit"
                )
        return wav.concatenate(buffers)


async def generate_speech(
    text: str,
    voice: str,
    capability: SpeechCapability | None = None,
    settings: Settings | None = None,
) -> str:
    """One-shot helper: build an assembler from settings and return a WAV data URI."""
    cfg = settings or Settings.from_env()
    if capability is None:
        from emovox.speech.providers import get_speech_provider
        capability = get_speech_provider(cfg)
    return await SpeechAssembler(capability, cfg).generate_speech(text, voice)
