"""Emovox — expressive text-to-speech assembly.

Quickstart::

    from emovox.speech import generate_speech

    uri = await generate_speech("[Happy] Hello there [Sad] but then...", voice="Kore")
    # "data:audio/wav;base64,..."
"""

__version__ = "1.0.0"
