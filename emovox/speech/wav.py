"""Canonical PCM WAV container codec.

Layout (little-endian)::

    RIFF <size-8> WAVE
    fmt  <16> <format=1> <channels> <rate> <byte rate> <block align> <bits>
    data <length> <samples...> [pad byte if length is odd]
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass

from emovox.errors import MalformedContainer

logger = logging.getLogger(__name__)

WAV_MIME_TYPE = "audio/wav"
PCM_FORMAT_CODE = 1
HEADER_SIZE = 44

_RIFF_HEADER = struct.Struct("<4sI4s")
_CHUNK_HEADER = struct.Struct("<4sI")
_FMT_BODY = struct.Struct("<HHIIHH")
_U16_MAX = 0xFFFF
_U32_MAX = 0xFFFFFFFF


@dataclass(frozen=True)
class AudioFormat:
    """How to interpret a run of interleaved PCM samples."""

    channels: int = 1
    sample_rate: int = 24000
    bits_per_sample: int = 16

    def __post_init__(self) -> None:
        if self.channels <= 0:
            raise ValueError(f"channels must be positive, got {self.channels}")
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.bits_per_sample <= 0 or self.bits_per_sample % 8:
            raise ValueError(
                f"bits_per_sample must be a positive multiple of 8, got {self.bits_per_sample}"
            )
        # fmt chunk stores these as u16/u32
        if self.bits_per_sample > _U16_MAX or self.frame_size > _U16_MAX:
            raise ValueError(f"frame size {self.frame_size} does not fit a WAV header")
        if self.byte_rate > _U32_MAX:
            raise ValueError(f"sample_rate {self.sample_rate} does not fit a WAV header")

    @property
    def frame_size(self) -> int:
        """Bytes per sample-time slice across all channels."""
        return self.channels * self.bits_per_sample // 8

    @property
    def byte_rate(self) -> int:
        return self.sample_rate * self.frame_size


@dataclass(frozen=True)
class RawAudioBuffer:
    """Raw interleaved samples paired with their format."""

    format: AudioFormat
    samples: bytes

    def __post_init__(self) -> None:
        if len(self.samples) % self.format.frame_size:
            raise ValueError(
                f"{len(self.samples)} bytes is not a multiple of the "
                f"{self.format.frame_size}-byte frame size"
            )

    @property
    def frame_count(self) -> int:
        return len(self.samples) // self.format.frame_size

    @property
    def duration(self) -> float:
        """Length in seconds."""
        return self.frame_count / self.format.sample_rate


def encode(fmt: AudioFormat, samples: bytes) -> bytes:
    """Wrap *samples* in a canonical 44-byte-header WAV container."""
    if len(samples) % fmt.frame_size:
        raise ValueError(
            f"{len(samples)} bytes is not a multiple of the {fmt.frame_size}-byte frame size"
        )
    pad = b"\x00" if len(samples) % 2 else b""
    riff_size = 4 + (_CHUNK_HEADER.size + _FMT_BODY.size) + _CHUNK_HEADER.size + len(samples) + len(pad)

    header = b"".join([
        _RIFF_HEADER.pack(b"RIFF", riff_size, b"WAVE"),
        _CHUNK_HEADER.pack(b"fmt ", _FMT_BODY.size),
        _FMT_BODY.pack(
            PCM_FORMAT_CODE,
            fmt.channels,
            fmt.sample_rate,
            fmt.byte_rate,
            fmt.frame_size,
            fmt.bits_per_sample,
        ),
        _CHUNK_HEADER.pack(b"data", len(samples)),
    ])
    return header + bytes(samples) + pad


def decode(container: bytes) -> tuple[AudioFormat, bytes]:
    """Split a WAV container into its format and raw sample bytes.

    Chunks other than ``fmt `` and ``data`` are skipped.  Raises
    :class:`MalformedContainer` on any structural violation.
    """
    data = bytes(container)
    if len(data) < _RIFF_HEADER.size:
        raise MalformedContainer(f"Container too short ({len(data)} bytes)")

    riff, _size, wave = _RIFF_HEADER.unpack_from(data, 0)
    if riff != b"RIFF" or wave != b"WAVE":
        raise MalformedContainer("Missing RIFF/WAVE marker")

    fmt: AudioFormat | None = None
    offset = _RIFF_HEADER.size
    while offset + _CHUNK_HEADER.size <= len(data):
        chunk_id, chunk_len = _CHUNK_HEADER.unpack_from(data, offset)
        body_start = offset + _CHUNK_HEADER.size
        remaining = len(data) - body_start

        if chunk_id == b"fmt ":
            if chunk_len < _FMT_BODY.size or chunk_len > remaining:
                raise MalformedContainer(f"Truncated fmt chunk ({chunk_len} bytes)")
            fmt = _parse_fmt(data, body_start)
        elif chunk_id == b"data":
            if fmt is None:
                raise MalformedContainer("data chunk precedes fmt chunk")
            if chunk_len > remaining:
                raise MalformedContainer(
                    f"Declared data length {chunk_len} exceeds the {remaining} bytes present"
                )
            samples = data[body_start:body_start + chunk_len]
            if len(samples) % fmt.frame_size:
                raise MalformedContainer(
                    f"data length {chunk_len} is not a multiple of frame size {fmt.frame_size}"
                )
            return fmt, samples

        # RIFF chunks are word aligned
        offset = body_start + chunk_len + (chunk_len & 1)

    if fmt is None:
        raise MalformedContainer("Missing fmt chunk")
    raise MalformedContainer("Missing data chunk")


def _parse_fmt(data: bytes, offset: int) -> AudioFormat:
    code, channels, rate, _byte_rate, _align, bits = _FMT_BODY.unpack_from(data, offset)
    if code != PCM_FORMAT_CODE:
        raise MalformedContainer(f"Unsupported format code {code} (only integer PCM)")
    try:
        return AudioFormat(channels=channels, sample_rate=rate, bits_per_sample=bits)
    except ValueError as exc:
        raise MalformedContainer(str(exc)) from exc


def concatenate(buffers: list[RawAudioBuffer]) -> RawAudioBuffer:
    """Join buffers that share one format into a new buffer."""
    if not buffers:
        raise ValueError("Nothing to concatenate")
    fmt = buffers[0].format
    for buf in buffers[1:]:
        if buf.format != fmt:
            raise ValueError(f"Cannot concatenate {buf.format} onto {fmt}")
    return RawAudioBuffer(format=fmt, samples=b"".join(b.samples for b in buffers))
