"""Offline tone provider — sine waves instead of speech, for local runs and demos.

Each voice maps to a fixed pitch and every prompt character adds a little
duration, so output length tracks the text without touching the network.
"""

from __future__ import annotations

import base64
import math
import struct

from emovox.config import Settings
from emovox.speech.base import SpeechCapability, SpeechRequest

_MS_PER_CHAR = 40
_MIN_MS = 200
_MAX_MS = 10_000
_BASE_FREQ = 180.0


class ToneSpeechProvider(SpeechCapability):
    """Generates 16-bit mono sine tones at ``default_sample_rate``."""

    name = "tone"

    def __init__(self, settings: Settings | None = None, amplitude: float = 0.3):
        cfg = settings or Settings()
        self.sample_rate = cfg.default_sample_rate
        self.amplitude = amplitude

    async def generate(self, request: SpeechRequest) -> str | None:
        if not request.prompt.strip():
            return None
        pcm = self._render(request.prompt, request.voice)
        encoded = base64.b64encode(pcm).decode("ascii")
        return f"data:audio/L16;codec=pcm;rate={self.sample_rate};base64,{encoded}"

    def frequency_for(self, voice: str) -> float:
        # Spread voices over roughly two octaves
        return _BASE_FREQ * 2 ** ((sum(map(ord, voice or "")) % 24) / 12)

    def _render(self, prompt: str, voice: str) -> bytes:
        duration_ms = min(max(len(prompt) * _MS_PER_CHAR, _MIN_MS), _MAX_MS)
        n_samples = self.sample_rate * duration_ms // 1000
        phase_inc = 2.0 * math.pi * self.frequency_for(voice) / self.sample_rate
        samples = [
            int(max(-32768, min(32767, self.amplitude * math.sin(i * phase_inc) * 32767)))
            for i in range(n_samples)
        ]
        return struct.pack(f"<{n_samples}h", *samples)
