"""Core data structures and pipeline."""

from mouthsync.core.pose import AnimationPose
from mouthsync.core.stream import AudioFrame, AudioConfig, SampleFrame
from mouthsync.core.pipeline import FacePipeline, PipelineConfig

__all__ = [
    "AnimationPose",
    "AudioFrame",
    "AudioConfig",
    "SampleFrame",
    "FacePipeline",
    "PipelineConfig",
]
