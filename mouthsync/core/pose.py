"""
AnimationPose - The sole output of mouthsync.

One pose per tick. It says how the face should look right now and
nothing about how it gets drawn.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace


def _clamp01(value: float) -> float:
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


@dataclass(frozen=True, slots=True)
class AnimationPose:
    """
    Per-tick face parameters, all within [0, 1].

    - openness: closed (0.0) ↔ fully open (1.0)
    - shape: wide (0.0) ↔ round (1.0)
    - blink: eyes open (0.0) ↔ shut (1.0)
    """
    openness: float = 0.0
    shape: float = 0.5
    blink: float = 0.0
    frame_id: int = 0
    timestamp_ms: int = 0

    def __post_init__(self) -> None:
        if not (0.0 <= self.openness <= 1.0):
            object.__setattr__(self, 'openness', _clamp01(self.openness))
        if not (0.0 <= self.shape <= 1.0):
            object.__setattr__(self, 'shape', _clamp01(self.shape))
        if not (0.0 <= self.blink <= 1.0):
            object.__setattr__(self, 'blink', _clamp01(self.blink))

    @property
    def is_speaking(self) -> bool:
        """Mouth visibly open."""
        return self.openness > 0.05

    @property
    def eye_openness(self) -> float:
        """How open the eyes are, with a slight overshoot so a blink fully closes them."""
        return 1.0 - min(1.0, self.blink * 1.2)

    def with_updates(self, **kwargs) -> AnimationPose:
        """Create a new pose with updated fields."""
        return replace(self, **kwargs)

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "openness": self.openness,
            "shape": self.shape,
            "blink": self.blink,
            "frame_id": self.frame_id,
            "timestamp_ms": self.timestamp_ms,
        }
