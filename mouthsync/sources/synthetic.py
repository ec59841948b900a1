"""Synthetic audio sources for testing."""

from __future__ import annotations

from typing import Iterator
import numpy as np

from mouthsync.core.stream import AudioConfig, AudioFrame, AudioSource


class _BufferSource(AudioSource):
    """Chops a precomputed sample buffer into frames."""

    def __init__(self, data: np.ndarray, sample_rate: int, frame_duration_ms: int) -> None:
        self._config = AudioConfig(
            sample_rate=sample_rate,
            frame_duration_ms=frame_duration_ms,
        )
        self._data = data
        self._position = 0
        self._frame_id = 0
        self._closed = False

    @property
    def config(self) -> AudioConfig:
        return self._config

    def frames(self) -> Iterator[AudioFrame]:
        samples_per_frame = self._config.samples_per_frame

        while self._position + samples_per_frame <= len(self._data) and not self._closed:
            frame_data = self._data[self._position:self._position + samples_per_frame]
            timestamp_ms = int(self._position / self._config.sample_rate * 1000)

            yield AudioFrame(
                data=frame_data,
                frame_id=self._frame_id,
                timestamp_ms=timestamp_ms,
                config=self._config,
            )

            self._position += samples_per_frame
            self._frame_id += 1

    def close(self) -> None:
        self._closed = True


class ArraySource(_BufferSource):
    """Audio source from numpy array. Peaks above 1.0 are normalized away."""

    def __init__(
        self,
        data: np.ndarray,
        sample_rate: int = 16000,
        frame_duration_ms: int = 20,
    ) -> None:
        samples = np.asarray(data, dtype=np.float32)
        if samples.size and (samples.max() > 1.0 or samples.min() < -1.0):
            samples = samples / max(abs(samples.max()), abs(samples.min()))
        super().__init__(samples, sample_rate, frame_duration_ms)


class SineSource(_BufferSource):
    """Generate sine wave audio."""

    def __init__(
        self,
        frequency_hz: float = 440.0,
        amplitude: float = 0.5,
        duration_ms: int = 1000,
        sample_rate: int = 16000,
        frame_duration_ms: int = 20,
    ) -> None:
        total_samples = int(sample_rate * duration_ms / 1000)
        t = np.arange(total_samples, dtype=np.float64) / sample_rate
        data = (amplitude * np.sin(2 * np.pi * frequency_hz * t)).astype(np.float32)
        super().__init__(data, sample_rate, frame_duration_ms)


class NoiseSource(_BufferSource):
    """Generate white noise audio."""

    def __init__(
        self,
        amplitude: float = 0.1,
        duration_ms: int = 1000,
        sample_rate: int = 16000,
        frame_duration_ms: int = 20,
        seed: int | None = None,
    ) -> None:
        rng = np.random.default_rng(seed)
        total_samples = int(sample_rate * duration_ms / 1000)
        data = (amplitude * rng.standard_normal(total_samples)).astype(np.float32)
        super().__init__(data, sample_rate, frame_duration_ms)


class SilenceSource(_BufferSource):
    """Generate silence."""

    def __init__(
        self,
        duration_ms: int = 1000,
        sample_rate: int = 16000,
        frame_duration_ms: int = 20,
    ) -> None:
        total_samples = int(sample_rate * duration_ms / 1000)
        super().__init__(np.zeros(total_samples, dtype=np.float32), sample_rate, frame_duration_ms)


class BurstSource(_BufferSource):
    """
    Syllable-like noise bursts separated by silence.

    Each burst is white noise shaped by a raised-cosine envelope, which
    gives the rising energy and shifting spectrum that speech onsets
    have without modelling speech itself.
    """

    def __init__(
        self,
        burst_ms: int = 180,
        gap_ms: int = 120,
        bursts: int = 5,
        amplitude: float = 0.3,
        sample_rate: int = 16000,
        frame_duration_ms: int = 20,
        seed: int | None = None,
    ) -> None:
        rng = np.random.default_rng(seed)
        burst_len = int(sample_rate * burst_ms / 1000)
        gap_len = int(sample_rate * gap_ms / 1000)

        envelope = 0.5 - 0.5 * np.cos(2 * np.pi * np.arange(burst_len) / max(1, burst_len))
        pieces = []
        for _ in range(bursts):
            pieces.append(amplitude * envelope * rng.standard_normal(burst_len))
            pieces.append(np.zeros(gap_len))

        data = np.concatenate(pieces).astype(np.float32) if pieces else np.zeros(0, dtype=np.float32)
        super().__init__(data, sample_rate, frame_duration_ms)
