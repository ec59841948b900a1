"""Feature extraction and gating."""

from mouthsync.analyzers.features import (
    FrameFeatures,
    compute_rms,
    compute_spectral_centroid01,
    compute_spectral_flux,
    extract_features,
)
from mouthsync.analyzers.gate import EnergyGate, GateConfig, GateState, VoiceGate
from mouthsync.analyzers.spectrum import SpectrumAnalyzer

__all__ = [
    "FrameFeatures",
    "compute_rms",
    "compute_spectral_centroid01",
    "compute_spectral_flux",
    "extract_features",
    "EnergyGate",
    "GateConfig",
    "GateState",
    "VoiceGate",
    "SpectrumAnalyzer",
]
