"""Emovox command line entry point.

Usage::

    python -m emovox "[Happy] Hello there [Sad] but then..." --voice Kore --out speech.wav
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from emovox.config import Settings
from emovox.errors import EmovoxError
from emovox.speech.assembly import SpeechAssembler
from emovox.speech.providers import available_providers, get_speech_provider


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
    parser = argparse.ArgumentParser(
        prog="python -m emovox",
        description="Render [Tag]-annotated text to a single WAV file",
    )
    parser.add_argument("text", help="Text to speak; [Label] markers set the expression")
    parser.add_argument("--voice", default="Kore", help="Prebuilt voice name (default: Kore)")
    parser.add_argument(
        "--out",
        metavar="PATH",
        default="speech.wav",
        help="Output WAV path (default: speech.wav)",
    )
    parser.add_argument(
        "--provider",
        choices=available_providers(),
        default=None,
        help="Speech provider (default: EMOVOX_SPEECH_PROVIDER or gemini)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline progress")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    settings = Settings.from_env()
    provider = get_speech_provider(settings, name=args.provider)
    try:
        container = asyncio.run(_render(provider, settings, args.text, args.voice))
    except EmovoxError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    out = Path(args.out)
    out.write_bytes(container)
    print(f"Wrote {len(container)} bytes to {out}")
    return 0


async def _render(provider, settings: Settings, text: str, voice: str) -> bytes:
    try:
        return await SpeechAssembler(provider, settings).assemble(text, voice)
    finally:
        await provider.aclose()


if __name__ == "__main__":
    sys.exit(main())
