"""
Animation state.

Smooths the gate's openness target and the centroid-derived shape
target into continuous values and bundles them with the blink into
one pose per tick.
"""

from __future__ import annotations

import numpy as np

from mouthsync.animation.blink import BlinkTimer
from mouthsync.animation.envelope import EnvelopeFollower
from mouthsync.core.pose import AnimationPose

# Shape follows spectral shifts faster than loudness. Empirical, open for tuning.
SHAPE_ATTACK_S = 0.08
SHAPE_RELEASE_S = 0.18
NEUTRAL_SHAPE = 0.5


class AnimationState:
    """
    Per-tick aggregation of openness, shape and blink.

    - openness: follows the gate target with the user's attack/release
    - shape: follows ``1 - centroid`` (bright spectrum = wide, dark = round)
    - blink: independent random blink timer
    """

    def __init__(
        self,
        attack_s: float = 0.05,
        release_s: float = 0.15,
        rng: np.random.Generator | None = None,
    ) -> None:
        self._openness = EnvelopeFollower(attack_s, release_s)
        self._shape = EnvelopeFollower(SHAPE_ATTACK_S, SHAPE_RELEASE_S, initial=NEUTRAL_SHAPE)
        self._blink = BlinkTimer(rng=rng)

    @property
    def openness(self) -> EnvelopeFollower:
        return self._openness

    @property
    def shape(self) -> EnvelopeFollower:
        return self._shape

    @property
    def blink(self) -> BlinkTimer:
        return self._blink

    def update(
        self,
        opening_target: float,
        centroid01: float,
        delta_time_s: float,
        frame_id: int = 0,
        timestamp_ms: int = 0,
    ) -> AnimationPose:
        openness = self._openness.step(opening_target, delta_time_s)
        shape = self._shape.step(1.0 - centroid01, delta_time_s)
        blink = self._blink.update(delta_time_s)

        return AnimationPose(
            openness=openness,
            shape=shape,
            blink=blink,
            frame_id=frame_id,
            timestamp_ms=timestamp_ms,
        )

    def current_pose(self) -> AnimationPose:
        """Pose as of the last update, without advancing time."""
        return AnimationPose(
            openness=self._openness.value,
            shape=self._shape.value,
            blink=self._blink.value,
        )

    def reset(self) -> None:
        self._openness.reset()
        self._shape.reset()
        self._blink.reset()
