"""Abstract speech-generation capability interface."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SpeechRequest:
    """One synthesis call: a prompt spoken with a prebuilt voice."""

    prompt: str
    voice: str
    model: str
    response_modality: str = "AUDIO"


class SpeechCapability:
    """Abstract interface for any speech-generation backend."""

    name = "abstract"

    def __init__(self, settings=None):
        pass

    async def generate(self, request: SpeechRequest) -> str | None:
        """Synthesize *request*.

        Returns the audio as a data URI
        (``data:<mime>[;rate=<N>];base64,<payload>``), or ``None`` when the
        model produced no media.  Transport failures raise
        :class:`~emovox.errors.CapabilityError`.
        """
        raise NotImplementedError

    async def health(self) -> bool:
        """Whether the backend is reachable."""
        return True

    async def aclose(self) -> None:
        """Release any held resources."""
