"""Emovox — HTTP server.

Exposes:
  POST /api/tts          — annotated text → ``{"audioDataUri": "data:audio/wav;base64,..."}``
  GET  /v1/voices        — prebuilt voice catalog
  GET  /v1/expressions   — expression labels usable as ``[Tag]`` markers
  GET  /health           — liveness check

Start with::

    python -m emovox.server
    # or
    uvicorn emovox.server:app --host 0.0.0.0 --port 5200
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from emovox import __version__
from emovox.config import Settings
from emovox.errors import EmovoxError, InvalidInput
from emovox.speech.assembly import SpeechAssembler
from emovox.speech.catalog import EXPRESSIONS, list_voices
from emovox.speech.providers import get_speech_provider
from emovox.speech.segmenter import strip_tags

logger = logging.getLogger(__name__)

# ──────────────────────────────────────────────────────────────────
# FastAPI app
# ──────────────────────────────────────────────────────────────────

app = FastAPI(title="Emovox", version=__version__)

_settings: Settings | None = None


def _get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


# ──────────────────────────────────────────────────────────────────
# Request / Response models
# ──────────────────────────────────────────────────────────────────

class SpeechRequestBody(BaseModel):
    text: str = ""
    voice: str = ""
    # When false, [Tag] markers are removed and the text is spoken plainly
    expressive: bool = True


class SpeechResponseBody(BaseModel):
    audioDataUri: str


# ──────────────────────────────────────────────────────────────────
# Endpoints
# ──────────────────────────────────────────────────────────────────

@app.get("/health")
async def health():
    settings = _get_settings()
    provider = get_speech_provider(settings)
    healthy = await provider.health()
    return {"status": "ok" if healthy else "degraded", "provider": provider.name}


@app.get("/v1/voices")
async def voices(gender: str | None = None):
    return {"voices": list_voices(gender)}


@app.get("/v1/expressions")
async def expressions():
    return {"expressions": list(EXPRESSIONS)}


@app.post("/api/tts", response_model=SpeechResponseBody)
async def text_to_speech(request: SpeechRequestBody):
    if not request.text or not request.voice:
        raise HTTPException(status_code=400, detail="Missing text or voice parameter")

    settings = _get_settings()
    text = request.text if request.expressive else strip_tags(request.text)
    provider = get_speech_provider(settings)
    assembler = SpeechAssembler(provider, settings)

    try:
        audio_uri = await assembler.generate_speech(text, request.voice)
    except InvalidInput as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except EmovoxError as exc:
        logger.error("TTS request failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    finally:
        await provider.aclose()

    return SpeechResponseBody(audioDataUri=audio_uri)


# ──────────────────────────────────────────────────────────────────
# Entry point
# ──────────────────────────────────────────────────────────────────

def main():
    import uvicorn
    settings = _get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    logger.info("Starting Emovox server on %s:%d", settings.host, settings.port)
    uvicorn.run("emovox.server:app", host=settings.host, port=settings.port, reload=False)


if __name__ == "__main__":
    main()
