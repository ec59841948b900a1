"""
Core processing pipeline.

The pipeline wires spectrum analysis, the gate and the animation state
together and produces one AnimationPose per tick.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, AsyncIterator, Iterator, Literal

import numpy as np

from mouthsync.analyzers.features import compute_spectral_centroid01
from mouthsync.analyzers.gate import EnergyGate, GateConfig, VoiceGate
from mouthsync.analyzers.spectrum import SpectrumAnalyzer
from mouthsync.animation.state import AnimationState
from mouthsync.core.pose import AnimationPose
from mouthsync.core.stream import AudioConfig, AudioFrame, AudioSource, SampleFrame
from mouthsync.core.validation import check_config_value

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """Pipeline configuration."""
    audio: AudioConfig = field(default_factory=AudioConfig)
    gate: GateConfig = field(default_factory=GateConfig)
    gate_mode: Literal["voice", "energy"] = "voice"
    attack_s: float = 0.05
    release_s: float = 0.15
    max_delta_s: float = 0.05
    fft_size: int = 2048
    band_limit: bool = True
    band_low_hz: float = 300.0
    band_high_hz: float = 3400.0
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.gate_mode not in ("voice", "energy"):
            raise ValueError(f"Unknown gate_mode {self.gate_mode!r}")
        self.attack_s = check_config_value("attack_s", self.attack_s)
        self.release_s = check_config_value("release_s", self.release_s)
        self.max_delta_s = check_config_value("max_delta_s", self.max_delta_s, positive=True)


# Flat names accepted by FacePipeline.configure()
GATE_SETTINGS = ("energy_threshold", "flux_threshold", "min_sustain_ms", "boost")
ENVELOPE_SETTINGS = ("attack_seconds", "release_seconds")


class FacePipeline:
    """
    Main processing pipeline.

    Feeds audio chunks through the spectrum analyzer and gate and emits
    an AnimationPose for every chunk.

    Usage:
        pipeline = FacePipeline(config)
        pipeline.on_pose(renderer.draw)

        for pose in pipeline.run_sync(source):
            ...

    Externally produced snapshots can skip the analyzer:
        pose = pipeline.tick(sample_frame, delta_time_s)
    """

    def __init__(self, config: PipelineConfig | None = None) -> None:
        self._config = config or PipelineConfig()
        self._analyzer = self._build_analyzer()
        self._gate = self._build_gate()
        self._state = AnimationState(
            attack_s=self._config.attack_s,
            release_s=self._config.release_s,
            rng=np.random.default_rng(self._config.seed),
        )
        self._callbacks: list[Callable[[AnimationPose], None]] = []
        self._running = False
        self._last_pose = AnimationPose()

    def _build_analyzer(self) -> SpectrumAnalyzer:
        config = self._config
        band = (config.band_low_hz, config.band_high_hz) if config.band_limit else None
        return SpectrumAnalyzer(
            sample_rate=config.audio.sample_rate,
            fft_size=config.fft_size,
            band=band,
        )

    def _build_gate(self) -> VoiceGate | EnergyGate:
        if self._config.gate_mode == "energy":
            return EnergyGate(self._config.gate)
        return VoiceGate(self._config.gate)

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @property
    def gate(self) -> VoiceGate | EnergyGate:
        return self._gate

    @property
    def state(self) -> AnimationState:
        return self._state

    @property
    def analyzer(self) -> SpectrumAnalyzer:
        return self._analyzer

    @property
    def last_pose(self) -> AnimationPose:
        return self._last_pose

    def on_pose(self, callback: Callable[[AnimationPose], None]) -> FacePipeline:
        """Register a callback for emitted poses. Returns self for chaining."""
        self._callbacks.append(callback)
        return self

    def configure(self, **settings: float) -> FacePipeline:
        """
        Change tuning parameters between ticks.

        Accepts energy_threshold, flux_threshold, min_sustain_ms, boost,
        attack_seconds and release_seconds. Each value is validated on
        its own; an invalid one raises ValueError and is not applied.
        Returns self for chaining.
        """
        for name, value in settings.items():
            if name in GATE_SETTINGS:
                setattr(self._config.gate, name, value)
            elif name == "attack_seconds":
                self._state.openness.attack_s = value
                self._config.attack_s = self._state.openness.attack_s
            elif name == "release_seconds":
                self._state.openness.release_s = value
                self._config.release_s = self._state.openness.release_s
            else:
                raise ValueError(f"Unknown setting {name!r}")
            logger.debug(f"Setting {name} = {value}")
        return self

    def settings(self) -> dict[str, float]:
        """Current values of the flat configuration surface."""
        gate = self._config.gate
        return {
            "energy_threshold": gate.energy_threshold,
            "flux_threshold": gate.flux_threshold,
            "min_sustain_ms": gate.min_sustain_ms,
            "boost": gate.boost,
            "attack_seconds": self._state.openness.attack_s,
            "release_seconds": self._state.openness.release_s,
        }

    def clamp_delta(self, delta_time_s: float) -> float:
        """Keep a tick's dt within [0, max_delta_s]."""
        return min(self._config.max_delta_s, max(0.0, delta_time_s))

    def tick(self, frame: SampleFrame, delta_time_s: float) -> AnimationPose:
        """
        Run one tick on an analysis snapshot.

        Callback exceptions are logged but don't stop the pipeline.
        """
        dt = self.clamp_delta(delta_time_s)

        target = self._gate.update(frame, dt)
        centroid = compute_spectral_centroid01(frame.freq_data)

        pose = self._state.update(
            target,
            centroid,
            dt,
            frame_id=frame.frame_id,
            timestamp_ms=frame.timestamp_ms,
        )
        self._last_pose = pose

        for callback in self._callbacks:
            try:
                callback(pose)
            except Exception as e:
                logger.warning(f"Pose callback failed on frame {frame.frame_id}: {e}")

        return pose

    def process_frame(
        self,
        frame: AudioFrame,
        delta_time_s: float | None = None,
    ) -> AnimationPose:
        """
        Push a raw chunk through the analyzer and run one tick.

        Without an explicit dt the chunk's own duration is used. Chunks
        recorded at a different sample rate than the analyzer raise
        ValueError.
        """
        if frame.config.sample_rate != self._analyzer.sample_rate:
            raise ValueError(
                f"Frame sample rate {frame.config.sample_rate} Hz does not match "
                f"analyzer sample rate {self._analyzer.sample_rate} Hz"
            )
        self._analyzer.push(frame)
        dt = frame.duration_s if delta_time_s is None else delta_time_s
        return self.tick(self._analyzer.snapshot(), dt)

    async def run(self, source: AudioSource) -> AsyncIterator[AnimationPose]:
        """
        Run the pipeline on an audio source.

        Yields one pose per frame.
        """
        self._running = True

        try:
            for frame in source.frames():
                if not self._running:
                    break

                yield self.process_frame(frame)

                await asyncio.sleep(0)
        finally:
            self._running = False
            source.close()

    def run_sync(self, source: AudioSource) -> Iterator[AnimationPose]:
        """
        Run the pipeline synchronously as an iterator.

        Use list(pipeline.run_sync(source)) for batch processing.
        """
        self._running = True

        try:
            for frame in source.frames():
                if not self._running:
                    break

                yield self.process_frame(frame)
        finally:
            self._running = False
            source.close()

    def stop(self) -> None:
        """Stop the pipeline."""
        self._running = False

    def reset(self) -> None:
        """Reset analyzer, gate and animation state."""
        self._analyzer.reset()
        self._gate.reset()
        self._state.reset()
        self._last_pose = AnimationPose()
