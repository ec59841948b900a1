"""
Per-frame acoustic features.

Pure functions: no history, no mutation. Keeping the previous spectrum
around is the gate's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
import numpy as np

if TYPE_CHECKING:
    from mouthsync.core.stream import SampleFrame


SILENCE_EPSILON = 1e-6
NEUTRAL_CENTROID = 0.5


@dataclass(frozen=True, slots=True)
class FrameFeatures:
    """Scalar features of one snapshot."""
    energy: float = 0.0
    flux: float = 0.0
    centroid: float = NEUTRAL_CENTROID


def compute_rms(time_data) -> float:
    """Root-mean-square of a time-domain buffer."""
    samples = np.asarray(time_data, dtype=np.float64)
    if samples.size == 0:
        raise ValueError("RMS needs at least one sample")
    return float(np.sqrt(np.mean(samples ** 2)))


def compute_spectral_flux(freq_data, prev_freq_data) -> float:
    """
    Rectified spectral difference between two magnitude buffers.

    Only bins that grew contribute, so a decaying spectrum scores 0.
    Computed in float64 so byte spectra never wrap around.
    """
    current = np.asarray(freq_data, dtype=np.float64)
    previous = np.asarray(prev_freq_data, dtype=np.float64)
    if current.shape != previous.shape:
        raise ValueError(
            f"Spectrum length changed: {previous.shape[0] if previous.ndim else 0} bins "
            f"before, {current.shape[0] if current.ndim else 0} now"
        )
    return float(np.sum(np.maximum(current - previous, 0.0)))


def compute_spectral_centroid01(freq_data) -> float:
    """
    Magnitude-weighted mean bin index, normalized to [0, 1].

    Silence (or a spectrum too short to have a range) gives the neutral
    midpoint 0.5.
    """
    mags = np.asarray(freq_data, dtype=np.float64)
    n_bins = mags.size
    if n_bins < 2:
        return NEUTRAL_CENTROID

    total = float(np.sum(mags))
    if total <= SILENCE_EPSILON:
        return NEUTRAL_CENTROID

    index = float(np.dot(np.arange(n_bins, dtype=np.float64), mags)) / total
    return max(0.0, min(1.0, index / (n_bins - 1)))


def extract_features(frame: SampleFrame, prev_freq_data) -> FrameFeatures:
    """All three features for a snapshot against a previous spectrum."""
    return FrameFeatures(
        energy=compute_rms(frame.time_data),
        flux=compute_spectral_flux(frame.freq_data, prev_freq_data),
        centroid=compute_spectral_centroid01(frame.freq_data),
    )
