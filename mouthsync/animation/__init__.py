"""Smoothing and pose aggregation."""

from mouthsync.animation.blink import BlinkTimer
from mouthsync.animation.envelope import EnvelopeFollower, follow_envelope
from mouthsync.animation.state import AnimationState

__all__ = [
    "AnimationState",
    "BlinkTimer",
    "EnvelopeFollower",
    "follow_envelope",
]
