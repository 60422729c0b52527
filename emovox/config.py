"""Runtime settings, loaded from ``EMOVOX_*`` environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields

logger = logging.getLogger(__name__)

_ENV_PREFIX = "EMOVOX_"


@dataclass
class Settings:
    """Service configuration.

    Every field can be overridden with ``EMOVOX_<FIELD_NAME>`` (upper-cased),
    e.g. ``EMOVOX_MAX_CONCURRENCY=8``.  ``GEMINI_API_KEY`` is accepted as a
    fallback for ``EMOVOX_GEMINI_API_KEY``.
    """

    # Provider
    speech_provider: str = "gemini"
    gemini_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    tts_model: str = "gemini-2.5-flash-preview-tts"
    default_sample_rate: int = 24000

    # Fan-out and timeouts (seconds)
    max_concurrency: int = 4
    segment_timeout: float = 60.0
    request_timeout: float = 120.0

    # Input validation
    min_text_chars: int = 2
    max_text_chars: int = 500

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 5200
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        if self.segment_timeout <= 0 or self.request_timeout <= 0:
            raise ValueError("timeouts must be positive")
        if self.default_sample_rate <= 0:
            raise ValueError("default_sample_rate must be positive")
        if self.min_text_chars > self.max_text_chars:
            raise ValueError("min_text_chars cannot exceed max_text_chars")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Settings:
        """Build settings from *environ* (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for f in fields(cls):
            raw = env.get(_ENV_PREFIX + f.name.upper())
            if raw is None and f.name == "gemini_api_key":
                raw = env.get("GEMINI_API_KEY")
            if raw is None or raw == "":
                continue
            values[f.name] = _coerce(f.name, f.type, raw)
        return cls(**values)


def _coerce(name: str, annotation: str, raw: str) -> object:
    # Annotations are strings under ``from __future__ import annotations``
    try:
        if annotation == "int":
            return int(raw)
        if annotation == "float":
            return float(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid value for {_ENV_PREFIX}{name.upper()}: {raw!r}") from exc
    return raw
