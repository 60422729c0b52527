"""Data-URI envelopes exchanged with the speech model and returned to callers."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

from emovox.errors import InvalidEnvelope

DEFAULT_SAMPLE_RATE = 24000

# data:audio/L16;codec=pcm;rate=24000;base64,....
_AUDIO_URI_RE = re.compile(r"^data:(audio/.+?)(;rate=(\d+))?;base64,")

_WAV_MIME_TYPES = {"audio/wav", "audio/x-wav", "audio/wave", "audio/vnd.wave"}


@dataclass(frozen=True)
class DecodedEnvelope:
    mime_type: str
    sample_rate: int
    payload: bytes

    @property
    def is_wav(self) -> bool:
        """True when the payload is a self-describing WAV container."""
        return self.mime_type.split(";", 1)[0].strip().lower() in _WAV_MIME_TYPES


def parse_data_uri(uri: str, default_rate: int = DEFAULT_SAMPLE_RATE) -> DecodedEnvelope:
    """Split an audio data URI into MIME type, sample rate and decoded bytes.

    A missing ``;rate=`` parameter means *default_rate*.
    """
    if not uri:
        raise InvalidEnvelope("Empty audio data URI")
    match = _AUDIO_URI_RE.match(uri)
    if not match:
        raise InvalidEnvelope("Could not parse audio data URI from model response.")

    rate = int(match.group(3)) if match.group(3) else default_rate
    if rate <= 0:
        raise InvalidEnvelope(f"Invalid sample rate {rate} in audio data URI")

    encoded = uri[match.end():]
    try:
        payload = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidEnvelope(f"Invalid base64 payload: {exc}") from exc
    if not payload:
        raise InvalidEnvelope("Audio data URI carries no payload")

    return DecodedEnvelope(mime_type=match.group(1), sample_rate=rate, payload=payload)


def to_data_uri(payload: bytes, mime_type: str = "audio/wav") -> str:
    """Wrap *payload* as ``data:<mime_type>;base64,<...>``."""
    return f"data:{mime_type};base64,{base64.b64encode(payload).decode('ascii')}"
