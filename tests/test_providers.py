"""Tests for speech providers and the provider registry."""

from __future__ import annotations

import base64
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from emovox.config import Settings
from emovox.errors import CapabilityError
from emovox.speech.base import SpeechCapability, SpeechRequest
from emovox.speech.envelope import parse_data_uri
from emovox.speech.providers import available_providers, get_speech_provider, register_provider
from emovox.speech.providers.gemini import GeminiSpeechProvider
from emovox.speech.providers.tone import ToneSpeechProvider


def _mock_session(status=200, json_body=None, text_body="", post_side_effect=None):
    mock_resp = MagicMock()
    mock_resp.status = status
    mock_resp.json = AsyncMock(return_value=json_body or {})
    mock_resp.text = AsyncMock(return_value=text_body)
    mock_resp.__aenter__ = AsyncMock(return_value=mock_resp)
    mock_resp.__aexit__ = AsyncMock(return_value=False)

    mock_session = MagicMock()
    if post_side_effect is not None:
        mock_session.post = MagicMock(side_effect=post_side_effect)
    else:
        mock_session.post = MagicMock(return_value=mock_resp)
    mock_session.get = MagicMock(return_value=mock_resp)
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=False)
    return mock_session


def _audio_response(pcm: bytes, mime="audio/L16;codec=pcm;rate=24000") -> dict:
    return {
        "candidates": [{
            "content": {"parts": [{"inlineData": {
                "mimeType": mime,
                "data": base64.b64encode(pcm).decode(),
            }}]},
        }],
    }


_REQUEST = SpeechRequest(prompt="Hello (The speech should be delivered in a happy tone.)",
                         voice="Kore", model="gemini-2.5-flash-preview-tts")


# ===========================================================================
# Capability interface
# ===========================================================================

class TestSpeechCapabilityInterface:
    @pytest.mark.asyncio
    async def test_generate_is_abstract(self):
        with pytest.raises(NotImplementedError):
            await SpeechCapability().generate(_REQUEST)

    @pytest.mark.asyncio
    async def test_default_health_and_close(self):
        cap = SpeechCapability()
        assert await cap.health() is True
        assert await cap.aclose() is None


# ===========================================================================
# Gemini provider
# ===========================================================================

class TestGeminiSpeechProvider:
    def test_init_from_settings(self):
        p = GeminiSpeechProvider(Settings(gemini_api_key="k", gemini_base_url="http://fake/v1beta/"))
        assert p.base_url == "http://fake/v1beta"
        assert p.api_key == "k"

    def test_build_payload(self):
        payload = GeminiSpeechProvider._build_payload(_REQUEST)
        assert payload["contents"][0]["parts"][0]["text"] == _REQUEST.prompt
        config = payload["generationConfig"]
        assert config["responseModalities"] == ["AUDIO"]
        assert config["speechConfig"]["voiceConfig"]["prebuiltVoiceConfig"]["voiceName"] == "Kore"

    def test_extract_media_url(self):
        url = GeminiSpeechProvider._extract_media_url(_audio_response(b"\x01\x00"))
        env = parse_data_uri(url)
        assert env.sample_rate == 24000
        assert env.payload == b"\x01\x00"

    def test_extract_skips_text_parts(self):
        data = _audio_response(b"\x02\x00")
        data["candidates"][0]["content"]["parts"].insert(0, {"text": "thinking..."})
        assert GeminiSpeechProvider._extract_media_url(data).startswith("data:audio/L16")

    @pytest.mark.parametrize("data", [
        {},
        {"candidates": []},
        {"candidates": [{"content": {"parts": [{"text": "no audio"}]}}]},
        {"candidates": [{"finishReason": "SAFETY"}]},
    ])
    def test_extract_returns_none_without_audio(self, data):
        assert GeminiSpeechProvider._extract_media_url(data) is None

    @pytest.mark.asyncio
    async def test_generate_posts_to_model_endpoint(self):
        session = _mock_session(json_body=_audio_response(b"\x05\x00" * 4))
        with patch("aiohttp.ClientSession", return_value=session):
            p = GeminiSpeechProvider(Settings(gemini_api_key="secret", gemini_base_url="http://fake"))
            url = await p.generate(_REQUEST)

        assert parse_data_uri(url).payload == b"\x05\x00" * 4
        args, kwargs = session.post.call_args
        assert args[0] == "http://fake/models/gemini-2.5-flash-preview-tts:generateContent"
        assert kwargs["headers"] == {"x-goog-api-key": "secret"}
        assert kwargs["json"]["contents"][0]["parts"][0]["text"] == _REQUEST.prompt

    @pytest.mark.asyncio
    async def test_generate_without_key_raises(self):
        p = GeminiSpeechProvider(Settings(gemini_api_key=""))
        with pytest.raises(CapabilityError, match="GEMINI_API_KEY"):
            await p.generate(_REQUEST)

    @pytest.mark.asyncio
    async def test_generate_http_error_raises(self):
        session = _mock_session(status=429, text_body="quota exceeded")
        with patch("aiohttp.ClientSession", return_value=session):
            p = GeminiSpeechProvider(Settings(gemini_api_key="k"))
            with pytest.raises(CapabilityError, match="429"):
                await p.generate(_REQUEST)

    @pytest.mark.asyncio
    async def test_generate_connection_error_raises(self):
        session = _mock_session(post_side_effect=aiohttp.ClientConnectionError("refused"))
        with patch("aiohttp.ClientSession", return_value=session):
            p = GeminiSpeechProvider(Settings(gemini_api_key="k"))
            with pytest.raises(CapabilityError, match="Cannot reach"):
                await p.generate(_REQUEST)

    @pytest.mark.asyncio
    async def test_generate_returns_none_without_audio(self):
        session = _mock_session(json_body={"candidates": []})
        with patch("aiohttp.ClientSession", return_value=session):
            p = GeminiSpeechProvider(Settings(gemini_api_key="k"))
            assert await p.generate(_REQUEST) is None

    @pytest.mark.asyncio
    async def test_health_false_without_key(self):
        assert await GeminiSpeechProvider(Settings(gemini_api_key="")).health() is False

    @pytest.mark.asyncio
    async def test_health_true_on_200(self):
        session = _mock_session(status=200)
        with patch("aiohttp.ClientSession", return_value=session):
            assert await GeminiSpeechProvider(Settings(gemini_api_key="k")).health() is True


# ===========================================================================
# Tone provider
# ===========================================================================

class TestToneSpeechProvider:
    @pytest.mark.asyncio
    async def test_generates_pcm_envelope(self):
        p = ToneSpeechProvider(Settings(default_sample_rate=16000))
        env = parse_data_uri(await p.generate(_REQUEST))
        assert env.mime_type == "audio/L16;codec=pcm"
        assert env.sample_rate == 16000
        assert len(env.payload) % 2 == 0
        assert len(env.payload) > 0

    @pytest.mark.asyncio
    async def test_duration_tracks_prompt_length(self):
        p = ToneSpeechProvider()
        short = parse_data_uri(await p.generate(SpeechRequest("Hello there, friend.", "Kore", "m")))
        long = parse_data_uri(await p.generate(SpeechRequest("Hello there, friend. " * 5, "Kore", "m")))
        assert len(long.payload) > len(short.payload)

    @pytest.mark.asyncio
    async def test_blank_prompt_returns_none(self):
        assert await ToneSpeechProvider().generate(SpeechRequest("  ", "Kore", "m")) is None

    def test_voices_get_distinct_pitches(self):
        p = ToneSpeechProvider()
        assert p.frequency_for("Kore") != p.frequency_for("Puck")


# ===========================================================================
# Registry
# ===========================================================================

class TestProviderRegistry:
    def test_builtins_registered(self):
        assert {"gemini", "tone"} <= set(available_providers())

    def test_selects_from_settings(self):
        assert isinstance(get_speech_provider(Settings(speech_provider="tone")), ToneSpeechProvider)
        assert isinstance(get_speech_provider(Settings(speech_provider="Gemini")), GeminiSpeechProvider)

    def test_explicit_name_wins(self):
        p = get_speech_provider(Settings(speech_provider="gemini"), name="tone")
        assert isinstance(p, ToneSpeechProvider)

    def test_env_selection(self, monkeypatch):
        monkeypatch.setenv("EMOVOX_SPEECH_PROVIDER", "tone")
        assert isinstance(get_speech_provider(), ToneSpeechProvider)

    def test_unknown_provider_raises(self):
        with pytest.raises(ValueError, match="Unknown speech provider"):
            get_speech_provider(Settings(speech_provider="nope"))

    def test_register_custom_provider(self):
        class _Custom(SpeechCapability):
            name = "custom"

        register_provider("custom-test", _Custom)
        assert isinstance(get_speech_provider(Settings(), name="custom-test"), _Custom)
