"""Tests for the voice and energy gates."""

import math

import numpy as np
import pytest

from mouthsync.analyzers.gate import ENERGY_GAIN, EnergyGate, GateConfig, VoiceGate
from mouthsync.core.stream import SampleFrame


SPEC_A = np.array([200, 0] * 8, dtype=np.uint8)
SPEC_B = np.array([0, 200] * 8, dtype=np.uint8)


def make_frame(level: float, spectrum: np.ndarray) -> SampleFrame:
    return SampleFrame.from_arrays(np.full(64, level), spectrum)


class TestGateConfig:
    def test_defaults(self):
        config = GateConfig()
        assert config.energy_threshold == 0.018
        assert config.flux_threshold == 1200.0
        assert config.min_sustain_ms == 50.0
        assert config.boost == 2.4

    @pytest.mark.parametrize("field", ["energy_threshold", "flux_threshold", "min_sustain_ms", "boost"])
    def test_rejects_negative_and_nan(self, field):
        config = GateConfig()
        before = getattr(config, field)
        with pytest.raises(ValueError):
            setattr(config, field, -1.0)
        with pytest.raises(ValueError):
            setattr(config, field, math.nan)
        assert getattr(config, field) == before

    def test_zero_boost_rejected(self):
        with pytest.raises(ValueError):
            GateConfig(boost=0.0)

    def test_zero_thresholds_allowed(self):
        config = GateConfig(energy_threshold=0, flux_threshold=0, min_sustain_ms=0)
        assert config.min_sustain_ms == 0.0


class TestVoiceGateDecision:
    def test_sustain_window_delays_opening(self):
        gate = VoiceGate(GateConfig(energy_threshold=0.018, flux_threshold=1200, min_sustain_ms=50))

        outputs = [gate.decide(0.05, 2000, 0.01) for _ in range(7)]

        assert outputs[:4] == [0.0, 0.0, 0.0, 0.0]
        assert all(v > 0.0 for v in outputs[4:])

    def test_single_failed_tick_resets_sustain(self):
        gate = VoiceGate(GateConfig(min_sustain_ms=50))
        for _ in range(20):
            gate.decide(0.05, 2000, 0.02)
        assert gate.sustain_ms == pytest.approx(400.0)
        assert gate.is_active

        assert gate.decide(0.05, 100, 0.02) == 0.0
        assert gate.sustain_ms == 0.0
        assert gate.decide(0.05, 2000, 0.02) == 0.0
        assert gate.sustain_ms == pytest.approx(20.0)

    def test_low_energy_fails(self):
        gate = VoiceGate(GateConfig(min_sustain_ms=10))
        assert gate.decide(0.01, 5000, 0.02) == 0.0
        assert gate.sustain_ms == 0.0

    def test_zero_window_stays_active_on_failed_tick(self):
        gate = VoiceGate(GateConfig(energy_threshold=0.018, flux_threshold=1200, min_sustain_ms=0, boost=2.4))

        assert gate.decide(0.01, 0.0, 0.02) == pytest.approx(0.01 * 2.4 * ENERGY_GAIN)
        assert gate.sustain_ms == 0.0
        assert gate.is_active

    def test_last_features_exposed(self):
        gate = VoiceGate()
        gate.decide(0.04, 1800.0, 0.02)
        assert gate.energy == 0.04
        assert gate.flux == 1800.0

        gate.update(make_frame(0.05, SPEC_A), 0.02)
        assert gate.energy == pytest.approx(0.05)
        assert gate.flux == 1600.0

    def test_output_scales_and_clips(self):
        gate = VoiceGate(GateConfig(min_sustain_ms=0, boost=1.0, energy_threshold=0.0, flux_threshold=0.0))
        assert gate.decide(0.05, 10, 0.02) == pytest.approx(0.05 * ENERGY_GAIN)
        assert gate.decide(0.5, 10, 0.02) == 1.0

    def test_end_to_end_scenario(self):
        gate = VoiceGate(GateConfig(energy_threshold=0.018, flux_threshold=1200, min_sustain_ms=0, boost=2.4))
        assert gate.decide(0.05, 1500, 1 / 60) == pytest.approx(1.0)

    def test_silence_always_zero(self):
        gate = VoiceGate(GateConfig(min_sustain_ms=0))
        for _ in range(10):
            assert gate.decide(0.0, 0.0, 0.02) == 0.0

    def test_negative_dt_never_makes_sustain_negative(self):
        gate = VoiceGate()
        gate.decide(0.05, 2000, -0.5)
        assert gate.sustain_ms == 0.0

    def test_reconfiguration_applies_to_next_tick(self):
        gate = VoiceGate(GateConfig(min_sustain_ms=10))
        first = gate.decide(0.03, 2000, 0.02)
        assert first > 0.0

        gate.energy_threshold = 0.04
        assert gate.config.energy_threshold == 0.04
        assert gate.decide(0.03, 2000, 0.02) == 0.0

        gate.energy_threshold = 0.018
        gate.boost = 1.0
        assert gate.decide(0.03, 2000, 0.02) == pytest.approx(0.03 * ENERGY_GAIN)

    def test_setters_validate(self):
        gate = VoiceGate()
        with pytest.raises(ValueError):
            gate.min_sustain_ms = float("inf")
        assert gate.min_sustain_ms == 50.0


class TestVoiceGateUpdate:
    def test_alternating_spectrum_opens_after_sustain(self):
        gate = VoiceGate(GateConfig(min_sustain_ms=50))
        spectra = [SPEC_A, SPEC_B] * 3

        outputs = [gate.update(make_frame(0.05, s), 0.02) for s in spectra]

        assert outputs[:2] == [0.0, 0.0]
        assert outputs[2] == pytest.approx(1.0)
        assert gate.state.flux == 1600.0

    def test_steady_spectrum_has_no_flux(self):
        gate = VoiceGate(GateConfig(min_sustain_ms=10))
        gate.update(make_frame(0.05, SPEC_A), 0.02)
        assert gate.update(make_frame(0.05, SPEC_A), 0.02) == 0.0
        assert gate.state.flux == 0.0

    def test_first_frame_measured_against_zeros(self):
        gate = VoiceGate()
        gate.update(make_frame(0.05, SPEC_A), 0.02)
        assert gate.state.flux == 1600.0

    def test_history_rotates_once_with_copy(self):
        gate = VoiceGate()
        spectrum = SPEC_A.copy()
        gate.update(make_frame(0.05, spectrum), 0.02)
        spectrum[:] = 0

        assert gate.state.prev_freq.tolist() == SPEC_A.tolist()

    def test_length_change_fails_fast(self):
        gate = VoiceGate()
        gate.update(make_frame(0.05, SPEC_A), 0.02)
        with pytest.raises(ValueError):
            gate.update(make_frame(0.05, SPEC_A[:8]), 0.02)

    def test_reset_clears_history(self):
        gate = VoiceGate(GateConfig(min_sustain_ms=0))
        gate.update(make_frame(0.05, SPEC_A), 0.02)
        gate.reset()

        assert gate.state.prev_freq is None
        assert gate.sustain_ms == 0.0
        gate.update(make_frame(0.05, SPEC_A[:8]), 0.02)


class TestEnergyGate:
    def test_opens_above_threshold(self):
        gate = EnergyGate(GateConfig(energy_threshold=0.018, boost=1.0))
        assert gate.update(make_frame(0.05, SPEC_A), 0.02) == pytest.approx(0.05 * 14, rel=1e-5)

    def test_closed_below_threshold(self):
        gate = EnergyGate()
        assert gate.update(make_frame(0.01, SPEC_A), 0.02) == 0.0

    def test_ignores_flux(self):
        gate = EnergyGate()
        first = gate.update(make_frame(0.05, SPEC_A), 0.02)
        second = gate.update(make_frame(0.05, SPEC_A), 0.02)
        assert first == second == 1.0
