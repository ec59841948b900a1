"""
mouthsync - Audio-driven mouth animation

mouthsync turns a live audio stream into a simple face pose per frame:
how open the mouth is, how round it is, and whether the eyes blink.
It reacts to energy and spectral change only. It never listens for words.
"""

from mouthsync.core.pose import AnimationPose
from mouthsync.core.stream import AudioFrame, AudioConfig, SampleFrame
from mouthsync.core.pipeline import FacePipeline, PipelineConfig
from mouthsync.analyzers.gate import GateConfig, VoiceGate
from mouthsync.animation.envelope import follow_envelope
from mouthsync.adapters.base import Adapter

__version__ = "0.1.0"
__all__ = [
    # Core data structures
    "AnimationPose",
    "AudioFrame",
    "AudioConfig",
    "SampleFrame",
    # Pipeline
    "FacePipeline",
    "PipelineConfig",
    # Gate and smoothing
    "GateConfig",
    "VoiceGate",
    "follow_envelope",
    # Extension protocols
    "Adapter",
]
