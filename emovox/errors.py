"""Error taxonomy for the speech assembly pipeline."""

from __future__ import annotations


class EmovoxError(Exception):
    """Base class for every error raised by Emovox."""


class InvalidInput(EmovoxError):
    """Request text or voice failed validation (too short, too long, no usable segments)."""


class SynthesisFailure(EmovoxError):
    """A single segment could not be synthesized; the whole request is aborted."""

    def __init__(self, segment_text: str, reason: str = "") -> None:
        self.segment_text = segment_text
        self.reason = reason
        message = f'Audio generation failed for segment: "{segment_text}"'
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class FormatMismatch(EmovoxError):
    """Segments of one request disagree on channels, sample rate or sample width."""


class MalformedContainer(EmovoxError):
    """A WAV container violated the canonical layout."""


class InvalidEnvelope(EmovoxError):
    """A data URI could not be parsed into MIME type, rate and payload."""


class CapabilityError(EmovoxError):
    """The speech-generation backend was unreachable or answered with an error."""
