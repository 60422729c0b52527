"""Gemini TTS provider via the Generative Language REST API.

The model answers ``generateContent`` with an ``inlineData`` part holding
base64 PCM and a MIME type such as ``audio/L16;codec=pcm;rate=24000``; this
provider re-wraps that part as a data URI.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from emovox.config import Settings
from emovox.errors import CapabilityError
from emovox.speech.base import SpeechCapability, SpeechRequest

logger = logging.getLogger(__name__)


class GeminiSpeechProvider(SpeechCapability):
    """Speaks ``POST /models/{model}:generateContent`` with audio output."""

    name = "gemini"

    def __init__(self, settings: Settings | None = None):
        cfg = settings or Settings()
        self.base_url = cfg.gemini_base_url.rstrip("/")
        self.api_key = cfg.gemini_api_key
        self.timeout = aiohttp.ClientTimeout(total=cfg.request_timeout)

    # ------------------------------------------------------------------
    # SpeechCapability interface
    # ------------------------------------------------------------------

    async def generate(self, request: SpeechRequest) -> str | None:
        if not self.api_key:
            raise CapabilityError(
                "API key not valid. Please set the GEMINI_API_KEY environment variable."
            )

        url = f"{self.base_url}/models/{request.model}:generateContent"
        payload = self._build_payload(request)

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(url, json=payload, headers=self._headers()) as resp:
                    if resp.status != 200:
                        body = await resp.text()
                        raise CapabilityError(f"Gemini returned {resp.status}: {body[:200]}")
                    data = await resp.json(content_type=None)
        except aiohttp.ClientError as exc:
            raise CapabilityError(f"Cannot reach Gemini at {self.base_url}: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise CapabilityError(f"Timeout waiting for Gemini at {self.base_url}") from exc

        return self._extract_media_url(data)

    async def health(self) -> bool:
        if not self.api_key:
            return False
        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=5)
            ) as session:
                async with session.get(f"{self.base_url}/models", headers=self._headers()) as resp:
                    return resp.status == 200
        except (aiohttp.ClientError, asyncio.TimeoutError):
            return False

    # ------------------------------------------------------------------
    # Wire format
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        return {"x-goog-api-key": self.api_key}

    @staticmethod
    def _build_payload(request: SpeechRequest) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": request.prompt}]}],
            "generationConfig": {
                "responseModalities": [request.response_modality],
                "speechConfig": {
                    "voiceConfig": {
                        "prebuiltVoiceConfig": {"voiceName": request.voice},
                    },
                },
            },
        }

    @staticmethod
    def _extract_media_url(data: dict[str, Any]) -> str | None:
        """Return the first inline audio part as a data URI, or None."""
        for candidate in data.get("candidates") or []:
            parts = (candidate.get("content") or {}).get("parts") or []
            for part in parts:
                inline = part.get("inlineData") or part.get("inline_data")
                if not inline or not inline.get("data"):
                    continue
                mime = inline.get("mimeType") or inline.get("mime_type") or "audio/L16"
                return f"data:{mime};base64,{inline['data']}"
        logger.warning("Gemini response carried no inline audio")
        return None
