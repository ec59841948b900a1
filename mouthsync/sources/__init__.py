"""Audio sources for the mouthsync pipeline."""

from mouthsync.sources.synthetic import ArraySource, BurstSource, SineSource, NoiseSource, SilenceSource
from mouthsync.sources.microphone import MicrophoneSource, list_audio_devices

__all__ = [
    "ArraySource",
    "BurstSource",
    "SineSource",
    "NoiseSource",
    "SilenceSource",
    "MicrophoneSource",
    "list_audio_devices",
]
