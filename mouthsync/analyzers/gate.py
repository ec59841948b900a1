"""
Voice gate.

Decides WHEN the mouth should react. It does not classify voice: it
looks for enough energy and enough spectral change at the same time,
and waits for that to hold for a short confirmation window before
opening.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from mouthsync.analyzers.features import compute_rms, compute_spectral_flux
from mouthsync.core.validation import check_config_value

if TYPE_CHECKING:
    from mouthsync.core.stream import SampleFrame

logger = logging.getLogger(__name__)

# Empirical: maps typical speech RMS (~0.02-0.08) into [0, 1] before boost.
ENERGY_GAIN = 12.0
# Same idea for the energy-only gate, which has no flux evidence to lean on.
ENERGY_GATE_GAIN = 14.0


@dataclass
class GateConfig:
    """
    Runtime-tunable gate parameters.

    Every assignment is validated: values must be finite and non-negative,
    boost strictly positive. A rejected value leaves the old one in place.
    """
    energy_threshold: float = 0.018
    flux_threshold: float = 1200.0
    min_sustain_ms: float = 50.0
    boost: float = 2.4

    def __setattr__(self, name: str, value) -> None:
        if name in _GATE_FIELDS:
            value = check_config_value(name, value, positive=(name == "boost"))
        object.__setattr__(self, name, value)


_GATE_FIELDS = frozenset(f.name for f in fields(GateConfig))


@dataclass
class GateState:
    """Mutable per-gate state. Owned by exactly one gate."""
    sustain_ms: float = 0.0
    prev_freq: NDArray | None = None
    energy: float = 0.0
    flux: float = 0.0
    active: bool = False


class VoiceGate:
    """
    Energy + spectral flux gate with a sustain (debounce) window.

    Per tick:
    - pass = energy > energy_threshold and flux > flux_threshold
    - pass accumulates sustain time, any failed tick resets it to 0
    - once sustain >= min_sustain_ms the gate is active and the target
      is min(1, energy * boost * 12); otherwise the target is 0

    Parameters:
        config: Shared GateConfig; edits apply from the next update
    """

    def __init__(self, config: GateConfig | None = None) -> None:
        self._config = config or GateConfig()
        self._state = GateState()

    @property
    def name(self) -> str:
        return "voice"

    @property
    def config(self) -> GateConfig:
        return self._config

    @property
    def state(self) -> GateState:
        return self._state

    def update(self, frame: SampleFrame, delta_time_s: float) -> float:
        """
        Consume one snapshot and return the openness target in [0, 1].

        The retained spectrum is rotated exactly once per call, after
        flux has been measured against it.
        """
        freq = np.asarray(frame.freq_data)
        prev = self._state.prev_freq
        if prev is None:
            prev = np.zeros_like(freq)

        energy = compute_rms(frame.time_data)
        flux = compute_spectral_flux(freq, prev)
        self._state.prev_freq = freq.copy()

        return self.decide(energy, flux, delta_time_s)

    def decide(self, energy: float, flux: float, delta_time_s: float) -> float:
        """Run the gate decision on already measured features."""
        config = self._config
        state = self._state
        state.energy = energy
        state.flux = flux

        passed = energy > config.energy_threshold and flux > config.flux_threshold
        if passed:
            state.sustain_ms += max(0.0, delta_time_s) * 1000.0
        else:
            state.sustain_ms = 0.0

        active = state.sustain_ms >= config.min_sustain_ms
        if active != state.active:
            logger.debug(
                f"Voice gate {'opened' if active else 'closed'} "
                f"(energy={energy:.4f}, flux={flux:.0f}, sustain={state.sustain_ms:.0f}ms)"
            )
        state.active = active

        if not active:
            return 0.0
        return min(1.0, energy * config.boost * ENERGY_GAIN)

    @property
    def energy_threshold(self) -> float:
        return self._config.energy_threshold

    @energy_threshold.setter
    def energy_threshold(self, value: float) -> None:
        self._config.energy_threshold = value

    @property
    def flux_threshold(self) -> float:
        return self._config.flux_threshold

    @flux_threshold.setter
    def flux_threshold(self, value: float) -> None:
        self._config.flux_threshold = value

    @property
    def min_sustain_ms(self) -> float:
        return self._config.min_sustain_ms

    @min_sustain_ms.setter
    def min_sustain_ms(self, value: float) -> None:
        self._config.min_sustain_ms = value

    @property
    def boost(self) -> float:
        return self._config.boost

    @boost.setter
    def boost(self, value: float) -> None:
        self._config.boost = value

    @property
    def sustain_ms(self) -> float:
        return self._state.sustain_ms

    @property
    def energy(self) -> float:
        """RMS energy seen on the last tick."""
        return self._state.energy

    @property
    def flux(self) -> float:
        """Spectral flux seen on the last tick."""
        return self._state.flux

    @property
    def is_active(self) -> bool:
        return self._state.active

    def reset(self) -> None:
        self._state = GateState()


class EnergyGate:
    """
    Energy-only gate.

    Opens whenever RMS exceeds the energy threshold, with no flux check
    and no sustain window. Reads energy_threshold and boost from the same
    GateConfig as VoiceGate so the two can be swapped at runtime.
    """

    def __init__(self, config: GateConfig | None = None) -> None:
        self._config = config or GateConfig()
        self._energy = 0.0

    @property
    def name(self) -> str:
        return "energy"

    @property
    def config(self) -> GateConfig:
        return self._config

    @property
    def energy(self) -> float:
        return self._energy

    def update(self, frame: SampleFrame, delta_time_s: float) -> float:
        self._energy = compute_rms(frame.time_data)
        if self._energy <= self._config.energy_threshold:
            return 0.0
        return min(1.0, max(0.0, self._energy * ENERGY_GATE_GAIN * self._config.boost))

    def reset(self) -> None:
        self._energy = 0.0
