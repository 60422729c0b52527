"""emovox.speech — expressive segmentation, synthesis and WAV assembly.

Public re-exports for convenient import.
"""

from emovox.speech.assembly import SpeechAssembler, generate_speech
from emovox.speech.base import SpeechCapability, SpeechRequest
from emovox.speech.catalog import EXPRESSIONS, list_voices
from emovox.speech.envelope import parse_data_uri, to_data_uri
from emovox.speech.providers import get_speech_provider, register_provider
from emovox.speech.segmenter import DEFAULT_EXPRESSION, Segment, segment
from emovox.speech.synthesizer import SegmentSynthesizer
from emovox.speech.wav import AudioFormat, RawAudioBuffer

__all__ = [
    "SpeechAssembler",
    "generate_speech",
    "SpeechCapability",
    "SpeechRequest",
    "EXPRESSIONS",
    "list_voices",
    "parse_data_uri",
    "to_data_uri",
    "get_speech_provider",
    "register_provider",
    "DEFAULT_EXPRESSION",
    "Segment",
    "segment",
    "SegmentSynthesizer",
    "AudioFormat",
    "RawAudioBuffer",
]
