"""
Spectrum analyzer.

Turns a stream of raw chunks into per-tick SampleFrames the way a
browser AnalyserNode does:
- keeps the latest ``fft_size`` samples as the time-domain window
- Blackman window, FFT, magnitude / N
- optional time smoothing between snapshots
- dB scaled and mapped onto 0..255 bytes between min_db and max_db

An optional brick-wall band limit (300-3400 Hz by default) is applied
to the window before analysis, so both the time-domain and the
frequency-domain view only see the voice band.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from mouthsync.core.stream import SampleFrame

if TYPE_CHECKING:
    from mouthsync.core.stream import AudioFrame


def blackman_window(size: int) -> NDArray[np.float64]:
    """Classic Blackman window (alpha = 0.16)."""
    alpha = 0.16
    a0 = 0.5 * (1 - alpha)
    a1 = 0.5
    a2 = 0.5 * alpha
    n = np.arange(size, dtype=np.float64)
    return a0 - a1 * np.cos(2 * np.pi * n / size) + a2 * np.cos(4 * np.pi * n / size)


def band_limit(
    samples: NDArray,
    sample_rate: int,
    low_hz: float,
    high_hz: float,
) -> NDArray[np.float32]:
    """Zero everything outside [low_hz, high_hz] in the spectrum and transform back."""
    spectrum = np.fft.rfft(samples)
    freqs = np.fft.rfftfreq(len(samples), d=1.0 / sample_rate)
    spectrum[(freqs < low_hz) | (freqs > high_hz)] = 0
    return np.fft.irfft(spectrum, n=len(samples)).astype(np.float32)


class SpectrumAnalyzer:
    """
    Sliding-window analyzer producing SampleFrames.

    Usage:
        analyzer = SpectrumAnalyzer(sample_rate=16000)
        for chunk in source.frames():
            analyzer.push(chunk)
            frame = analyzer.snapshot()
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        fft_size: int = 2048,
        min_db: float = -100.0,
        max_db: float = -30.0,
        smoothing: float = 0.0,
        band: tuple[float, float] | None = (300.0, 3400.0),
    ) -> None:
        if fft_size < 32 or fft_size & (fft_size - 1):
            raise ValueError(f"fft_size must be a power of two >= 32, got {fft_size}")
        if not (0.0 <= smoothing < 1.0):
            raise ValueError(f"smoothing must be in [0, 1), got {smoothing}")
        if max_db <= min_db:
            raise ValueError(f"max_db ({max_db}) must be above min_db ({min_db})")
        if band is not None and not (0.0 <= band[0] < band[1]):
            raise ValueError(f"Invalid band {band}")

        self._sample_rate = sample_rate
        self._fft_size = fft_size
        self._min_db = min_db
        self._max_db = max_db
        self._smoothing = smoothing
        self._band = band

        self._window = blackman_window(fft_size)
        self._samples = np.zeros(fft_size, dtype=np.float32)
        self._smoothed = np.zeros(fft_size // 2, dtype=np.float64)
        self._frame_id = 0
        self._timestamp_ms = 0

    @property
    def fft_size(self) -> int:
        return self._fft_size

    @property
    def frequency_bin_count(self) -> int:
        return self._fft_size // 2

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    def push(self, frame: AudioFrame) -> None:
        """Slide the window forward by one chunk."""
        self.push_samples(frame.data)
        self._frame_id = frame.frame_id
        self._timestamp_ms = frame.timestamp_ms

    def push_samples(self, samples) -> None:
        data = np.asarray(samples, dtype=np.float32).ravel()
        if data.size >= self._fft_size:
            self._samples = data[-self._fft_size:].copy()
        else:
            self._samples = np.concatenate([self._samples[data.size:], data])

    def snapshot(self) -> SampleFrame:
        """Analyze the current window."""
        time_data = self._samples
        if self._band is not None:
            time_data = band_limit(time_data, self._sample_rate, *self._band)

        return SampleFrame(
            time_data=time_data.copy(),
            freq_data=self._byte_spectrum(time_data),
            frame_id=self._frame_id,
            timestamp_ms=self._timestamp_ms,
        )

    def _byte_spectrum(self, time_data: NDArray[np.float32]) -> NDArray[np.uint8]:
        spectrum = np.fft.rfft(time_data.astype(np.float64) * self._window)
        magnitude = np.abs(spectrum[: self.frequency_bin_count]) / self._fft_size

        self._smoothed = self._smoothing * self._smoothed + (1.0 - self._smoothing) * magnitude

        with np.errstate(divide="ignore"):
            db = 20.0 * np.log10(self._smoothed)
        scaled = np.floor(255.0 / (self._max_db - self._min_db) * (db - self._min_db))
        return np.clip(np.nan_to_num(scaled, neginf=0.0), 0, 255).astype(np.uint8)

    def reset(self) -> None:
        self._samples = np.zeros(self._fft_size, dtype=np.float32)
        self._smoothed = np.zeros(self.frequency_bin_count, dtype=np.float64)
        self._frame_id = 0
        self._timestamp_ms = 0
