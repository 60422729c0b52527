"""Per-segment synthesis: prompt building, model call, and PCM extraction."""

from __future__ import annotations

import logging

from emovox.errors import CapabilityError, InvalidEnvelope, MalformedContainer, SynthesisFailure
from emovox.speech import wav
from emovox.speech.base import SpeechCapability, SpeechRequest
from emovox.speech.envelope import DEFAULT_SAMPLE_RATE, parse_data_uri
from emovox.speech.segmenter import Segment, is_default_expression

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash-preview-tts"

# Raw PCM from the model is always 16-bit mono
PCM_CHANNELS = 1
PCM_BITS = 16


def tone_directive(expression: str | None) -> str:
    """Natural-language delivery hint for *expression*; empty for ``Default``."""
    if is_default_expression(expression):
        return ""
    return f"(The speech should be delivered in a {expression.lower()} tone.)"


def build_prompt(segment: Segment) -> str:
    directive = tone_directive(segment.expression)
    return f"{segment.text} {directive}" if directive else segment.text


class SegmentSynthesizer:
    """Turns one :class:`Segment` into a :class:`~emovox.speech.wav.RawAudioBuffer`.

    Holds no per-call state, so one instance can serve concurrent calls.
    """

    def __init__(
        self,
        capability: SpeechCapability,
        model: str = DEFAULT_MODEL,
        default_sample_rate: int = DEFAULT_SAMPLE_RATE,
    ) -> None:
        self.capability = capability
        self.model = model
        self.default_sample_rate = default_sample_rate

    async def synthesize(self, segment: Segment, voice: str) -> wav.RawAudioBuffer:
        request = SpeechRequest(prompt=build_prompt(segment), voice=voice, model=self.model)
        logger.debug("Synthesizing %r with voice %s", request.prompt, voice)

        try:
            media_url = await self.capability.generate(request)
        except CapabilityError as exc:
            raise SynthesisFailure(segment.text, str(exc)) from exc

        if not media_url:
            raise SynthesisFailure(segment.text, "no media returned")

        try:
            buffer = self._decode(media_url)
        except (InvalidEnvelope, MalformedContainer) as exc:
            raise SynthesisFailure(segment.text, str(exc)) from exc
        except ValueError as exc:
            raise SynthesisFailure(segment.text, f"invalid audio: {exc}") from exc

        logger.debug(
            "Segment %r: %d bytes @ %d Hz (%.2fs)",
            segment.text[:40],
            len(buffer.samples),
            buffer.format.sample_rate,
            buffer.duration,
        )
        return buffer

    def _decode(self, media_url: str) -> wav.RawAudioBuffer:
        envelope = parse_data_uri(media_url, default_rate=self.default_sample_rate)
        if envelope.is_wav:
            fmt, samples = wav.decode(envelope.payload)
            return wav.RawAudioBuffer(format=fmt, samples=samples)
        fmt = wav.AudioFormat(
            channels=PCM_CHANNELS,
            sample_rate=envelope.sample_rate,
            bits_per_sample=PCM_BITS,
        )
        return wav.RawAudioBuffer(format=fmt, samples=envelope.payload)
