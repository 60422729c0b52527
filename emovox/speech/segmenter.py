"""Expression segmenter — splits ``[Tag] text`` markup into labelled segments."""

from __future__ import annotations

import re
from dataclasses import dataclass

DEFAULT_EXPRESSION = "Default"

# Only letters and whitespace make a tag; "[123]" or "[a-b]" stay as text.
_TAG_RE = re.compile(r"\[([A-Za-z\s]+)\]")
# Any bracketed run, letter label or not
_BRACKET_RE = re.compile(r"\[.*?\]")


@dataclass(frozen=True)
class Segment:
    """A span of text spoken with one expression."""

    text: str
    expression: str = DEFAULT_EXPRESSION

    @property
    def is_default(self) -> bool:
        return is_default_expression(self.expression)


def is_default_expression(label: str | None) -> bool:
    return not label or label.strip().lower() == DEFAULT_EXPRESSION.lower()


def _normalize_label(raw: str) -> str:
    return " ".join(raw.split())


def segment(text: str) -> list[Segment]:
    """Parse annotated *text* into ordered segments.

    Each ``[Label]`` marker sets the expression for the text that follows it,
    until the next marker.  Text before the first marker is ``Default``.
    Spans that are empty after trimming are dropped, so
    ``"[Happy][Sad] Hello"`` yields a single ``Sad`` segment.

    Returns ``[]`` for empty or whitespace-only input.  If tags consume
    everything (e.g. ``"[Happy]"``), the whole trimmed input becomes one
    ``Default`` segment.
    """
    stripped = (text or "").strip()
    if not stripped:
        return []

    segments: list[Segment] = []
    current = DEFAULT_EXPRESSION
    span_start = 0

    for match in _TAG_RE.finditer(stripped):
        span = stripped[span_start:match.start()].strip()
        if span:
            segments.append(Segment(text=span, expression=current))
        current = _normalize_label(match.group(1)) or DEFAULT_EXPRESSION
        span_start = match.end()

    tail = stripped[span_start:].strip()
    if tail:
        segments.append(Segment(text=tail, expression=current))

    if not segments:
        return [Segment(text=stripped, expression=DEFAULT_EXPRESSION)]
    return segments


def strip_tags(text: str) -> str:
    """Remove every bracketed run, collapsing the surrounding whitespace.

    Unlike :func:`segment`, any bracketed run counts, ``[123]`` included.
    """
    return " ".join(_BRACKET_RE.sub(" ", text or "").split())
