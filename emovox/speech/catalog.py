"""Prebuilt Gemini voices and the expression labels offered to users."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

VOICES = [
    {"id": "Achernar",      "name": "Eleni",     "gender": "female"},
    {"id": "Aoede",         "name": "Rahel",     "gender": "female"},
    {"id": "Autonoe",       "name": "Biruktait", "gender": "female"},
    {"id": "Erinome",       "name": "Debora",    "gender": "female"},
    {"id": "Gacrux",        "name": "Samrawit",  "gender": "female"},
    {"id": "Kore",          "name": "Layla",     "gender": "female"},
    {"id": "Laomedeia",     "name": "Tadelech",  "gender": "female"},
    {"id": "Leda",          "name": "Lia",       "gender": "female"},
    {"id": "Pulcherrima",   "name": "Zebiba",    "gender": "female"},
    {"id": "Sulafat",       "name": "Tirsit",    "gender": "female"},
    {"id": "Umbriel",       "name": "Kidist",    "gender": "female"},
    {"id": "Vindemiatrix",  "name": "Ekram",     "gender": "female"},
    {"id": "Achird",        "name": "Kemal",     "gender": "male"},
    {"id": "Algenib",       "name": "Haile",     "gender": "male"},
    {"id": "Algieba",       "name": "Caleb",     "gender": "male"},
    {"id": "Alnilam",       "name": "Gideon",    "gender": "male"},
    {"id": "Callirrhoe",    "name": "Nardos",    "gender": "male"},
    {"id": "Charon",        "name": "Getachew",  "gender": "male"},
    {"id": "Despina",       "name": "Yordanos",  "gender": "male"},
    {"id": "Enceladus",     "name": "Elias",     "gender": "male"},
    {"id": "Fenrir",        "name": "Bereket",   "gender": "male"},
    {"id": "Orus",          "name": "Dawit",     "gender": "male"},
    {"id": "Puck",          "name": "Emran",     "gender": "male"},
    {"id": "Rasalgethi",    "name": "Mulugeta",  "gender": "male"},
    {"id": "Sadachbia",     "name": "Khalid",    "gender": "male"},
    {"id": "Sadaltager",    "name": "Solomon",   "gender": "male"},
    {"id": "Schedar",       "name": "Biruk",     "gender": "male"},
    {"id": "Zephyr",        "name": "Abebe",     "gender": "male"},
    {"id": "Zubenelgenubi", "name": "Tesfaye",   "gender": "male"},
]

EXPRESSIONS = sorted([
    "Default", "Angry", "Terrified", "Proud", "Guilty", "Playful", "Bored",
    "Grateful", "Whispering", "Sad", "Happy", "Excited", "Shouting", "Afraid",
    "News Host", "Robotic", "Breathy", "Old Radio", "Monster", "Cheerful",
    "Customer Support", "Professional", "Podcast Host",
])

_VOICES_BY_ID = {v["id"].lower(): v for v in VOICES}


def list_voices(gender: str | None = None) -> list[dict]:
    """Return the voice catalog, optionally filtered by gender."""
    if gender:
        return [dict(v) for v in VOICES if v["gender"] == gender.lower()]
    return [dict(v) for v in VOICES]


def is_known_voice(voice: str) -> bool:
    return (voice or "").lower() in _VOICES_BY_ID


def check_voice(voice: str) -> str:
    """Return *voice* unchanged, logging when it is not a catalog voice.

    The model is the authority on voice names, so unknown ones pass through.
    """
    if not is_known_voice(voice):
        logger.warning("Unknown voice %r, passing through to the model", voice)
    return voice
