"""
Envelope follower with separate attack and release time constants.

Fast attack makes onsets snappy, a slower release lets the mouth
settle naturally instead of snapping shut.
"""

from __future__ import annotations

import math

from mouthsync.core.validation import check_config_value

MIN_TIME_CONSTANT_S = 0.001


def follow_envelope(
    current: float,
    target: float,
    delta_time_s: float,
    attack_s: float,
    release_s: float,
) -> float:
    """
    One exponential smoothing step from ``current`` toward ``target``.

    Rising uses the attack constant, falling uses release. Both are
    floored at 1 ms.
    """
    attack = max(MIN_TIME_CONSTANT_S, attack_s)
    release = max(MIN_TIME_CONSTANT_S, release_s)
    tau = attack if target > current else release

    k = 1.0 - math.exp(-max(0.0, delta_time_s) / tau)
    return current + (target - current) * k


class EnvelopeFollower:
    """Keeps the current value of one animated parameter between ticks."""

    def __init__(
        self,
        attack_s: float,
        release_s: float,
        initial: float = 0.0,
    ) -> None:
        self.attack_s = attack_s
        self.release_s = release_s
        self._initial = initial
        self._value = initial

    @property
    def value(self) -> float:
        return self._value

    @property
    def attack_s(self) -> float:
        return self._attack_s

    @attack_s.setter
    def attack_s(self, value: float) -> None:
        self._attack_s = check_config_value("attack_s", value)

    @property
    def release_s(self) -> float:
        return self._release_s

    @release_s.setter
    def release_s(self, value: float) -> None:
        self._release_s = check_config_value("release_s", value)

    def step(self, target: float, delta_time_s: float) -> float:
        self._value = follow_envelope(
            self._value, target, delta_time_s, self._attack_s, self._release_s
        )
        return self._value

    def reset(self, value: float | None = None) -> None:
        self._value = self._initial if value is None else value
