"""
Audio stream abstractions.

Sources deliver raw chunks (AudioFrame). The spectrum analyzer turns the
most recent window of chunks into a SampleFrame snapshot, which is all
the gate and animation layers ever read.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Protocol, runtime_checkable
import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True, slots=True)
class AudioConfig:
    """Audio stream configuration."""
    sample_rate: int = 16000
    channels: int = 1
    frame_duration_ms: int = 20
    dtype: str = "float32"

    @property
    def frame_size(self) -> int:
        """Samples per frame."""
        return int(self.sample_rate * self.frame_duration_ms / 1000)

    @property
    def samples_per_frame(self) -> int:
        return self.frame_size


@dataclass(slots=True)
class AudioFrame:
    """
    Single raw audio chunk from a source.

    Attributes:
        data: Audio samples as float32 numpy array, normalized to [-1.0, 1.0]
        frame_id: Monotonically increasing frame identifier
        timestamp_ms: Timestamp in milliseconds from stream start
        config: Audio configuration
    """
    data: NDArray[np.float32]
    frame_id: int
    timestamp_ms: int
    config: AudioConfig

    @property
    def duration_ms(self) -> int:
        """Frame duration in milliseconds."""
        return self.config.frame_duration_ms

    @property
    def duration_s(self) -> float:
        return self.config.frame_duration_ms / 1000.0

    @classmethod
    def silence(cls, frame_id: int, timestamp_ms: int, config: AudioConfig) -> AudioFrame:
        """Create a silent frame."""
        return cls(
            data=np.zeros(config.frame_size, dtype=np.float32),
            frame_id=frame_id,
            timestamp_ms=timestamp_ms,
            config=config,
        )


@dataclass(frozen=True, slots=True)
class SampleFrame:
    """
    Analysis snapshot for one tick.

    Attributes:
        time_data: Time-domain window, length = analysis window size
        freq_data: Non-negative magnitude per bin, length = window size / 2
        frame_id: Identifier of the newest chunk in the window
        timestamp_ms: Timestamp of the newest chunk
    """
    time_data: NDArray[np.float32]
    freq_data: NDArray
    frame_id: int = 0
    timestamp_ms: int = 0

    @property
    def num_bins(self) -> int:
        return len(self.freq_data)

    @classmethod
    def from_arrays(
        cls,
        time_data,
        freq_data,
        frame_id: int = 0,
        timestamp_ms: int = 0,
    ) -> SampleFrame:
        """Build a snapshot from any array-likes (lists included)."""
        return cls(
            time_data=np.asarray(time_data, dtype=np.float32),
            freq_data=np.asarray(freq_data),
            frame_id=frame_id,
            timestamp_ms=timestamp_ms,
        )


@runtime_checkable
class AudioSource(Protocol):
    """Protocol for audio sources."""

    @property
    def config(self) -> AudioConfig:
        """Return audio configuration."""
        ...

    def frames(self) -> Iterator[AudioFrame]:
        """Yield audio frames."""
        ...

    def close(self) -> None:
        """Close the source."""
        ...
