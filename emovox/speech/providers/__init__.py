"""Speech capability factory."""

from __future__ import annotations

from emovox.config import Settings
from emovox.speech.base import SpeechCapability

# Registry of provider names → classes
_PROVIDER_REGISTRY: dict[str, type[SpeechCapability]] = {}


def register_provider(name: str, cls: type[SpeechCapability]) -> None:
    """Register a speech provider class under *name*."""
    _PROVIDER_REGISTRY[name] = cls


def available_providers() -> list[str]:
    return sorted(_PROVIDER_REGISTRY)


def get_speech_provider(
    settings: Settings | None = None,
    name: str | None = None,
) -> SpeechCapability:
    """Instantiate the provider named by *name* or ``settings.speech_provider``."""
    cfg = settings or Settings.from_env()
    provider_name = (name or cfg.speech_provider).lower()
    if provider_name not in _PROVIDER_REGISTRY:
        raise ValueError(
            f"Unknown speech provider '{provider_name}'. "
            f"Available: {available_providers()}"
        )
    return _PROVIDER_REGISTRY[provider_name](cfg)


# ---------------------------------------------------------------------------
# Register built-in providers
# ---------------------------------------------------------------------------

from emovox.speech.providers.gemini import GeminiSpeechProvider  # noqa: E402
from emovox.speech.providers.tone import ToneSpeechProvider      # noqa: E402

register_provider("gemini", GeminiSpeechProvider)
register_provider("tone", ToneSpeechProvider)

__all__ = [
    "SpeechCapability",
    "GeminiSpeechProvider",
    "ToneSpeechProvider",
    "available_providers",
    "get_speech_provider",
    "register_provider",
]
