"""Eye-blink timer."""

from __future__ import annotations

import numpy as np

from mouthsync.core.validation import check_config_value


class BlinkTimer:
    """
    Fires a blink at random intervals and lets it fade out.

    Time only advances through ``update(dt)``: elapsed milliseconds are
    accumulated and compared with the next scheduled blink. When the
    schedule is passed the value jumps to 1.0 and the next blink is
    drawn uniformly from [min_interval_ms, max_interval_ms]. Every tick
    the value then decays linearly by ``decay_per_s * dt``.

    Parameters:
        rng: Random generator; pass a seeded one for reproducible blinks
        min_interval_ms: Shortest gap between blinks (default 1200)
        max_interval_ms: Longest gap between blinks (default 3700)
        decay_per_s: Linear fade rate (default 6.0, i.e. ~170ms per blink)
    """

    def __init__(
        self,
        rng: np.random.Generator | None = None,
        min_interval_ms: float = 1200.0,
        max_interval_ms: float = 3700.0,
        decay_per_s: float = 6.0,
    ) -> None:
        min_interval_ms = check_config_value("min_interval_ms", min_interval_ms)
        max_interval_ms = check_config_value("max_interval_ms", max_interval_ms)
        if max_interval_ms < min_interval_ms:
            raise ValueError(
                f"max_interval_ms ({max_interval_ms}) is below min_interval_ms ({min_interval_ms})"
            )

        self._rng = rng if rng is not None else np.random.default_rng()
        self._min_interval_ms = min_interval_ms
        self._max_interval_ms = max_interval_ms
        self._decay_per_s = check_config_value("decay_per_s", decay_per_s)

        self._elapsed_ms = 0.0
        self._value = 0.0
        self._next_blink_ms = self._draw_interval()

    @property
    def value(self) -> float:
        return self._value

    @property
    def next_blink_ms(self) -> float:
        """Elapsed time at which the next blink fires."""
        return self._next_blink_ms

    @property
    def elapsed_ms(self) -> float:
        return self._elapsed_ms

    def _draw_interval(self) -> float:
        return float(self._rng.uniform(self._min_interval_ms, self._max_interval_ms))

    def update(self, delta_time_s: float) -> float:
        delta_time_s = max(0.0, delta_time_s)
        self._elapsed_ms += delta_time_s * 1000.0

        if self._elapsed_ms > self._next_blink_ms:
            self._value = 1.0
            self._next_blink_ms = self._elapsed_ms + self._draw_interval()

        self._value = max(0.0, self._value - delta_time_s * self._decay_per_s)
        return self._value

    def reset(self) -> None:
        self._elapsed_ms = 0.0
        self._value = 0.0
        self._next_blink_ms = self._draw_interval()
