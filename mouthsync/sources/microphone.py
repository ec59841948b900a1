"""
Real-time microphone audio source.

Requires: pip install sounddevice
"""

from __future__ import annotations

import logging
import time
from typing import Iterator
from collections import deque
from threading import Event
import numpy as np

from mouthsync.core.stream import AudioConfig, AudioFrame, AudioSource

logger = logging.getLogger(__name__)


def _import_sounddevice():
    try:
        import sounddevice as sd
    except ImportError:
        raise ImportError(
            "sounddevice is required for microphone input.\n"
            "Install with: pip install sounddevice"
        ) from None
    return sd


class MicrophoneSource(AudioSource):
    """
    Real-time microphone input using sounddevice.

    Usage:
        source = MicrophoneSource()

        for pose in pipeline.run_sync(source):
            renderer.draw(pose)

        # Or with timeout
        source = MicrophoneSource(max_duration_s=10.0)

    Press Ctrl+C to stop recording.
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        frame_duration_ms: int = 20,
        channels: int = 1,
        device: int | str | None = None,
        max_duration_s: float | None = None,
        buffer_size: int = 100,
    ) -> None:
        """
        Initialize microphone source.

        Args:
            sample_rate: Audio sample rate (default 16kHz)
            frame_duration_ms: Frame duration in ms (default 20ms)
            channels: Number of audio channels (default 1 = mono)
            device: Audio device index or name (None = default)
            max_duration_s: Maximum recording duration (None = unlimited)
            buffer_size: Internal frame buffer size
        """
        self._config = AudioConfig(
            sample_rate=sample_rate,
            frame_duration_ms=frame_duration_ms,
            channels=channels,
        )
        self._device = device
        self._max_duration_s = max_duration_s

        self._frame_buffer: deque[np.ndarray] = deque(maxlen=buffer_size)
        self._frame_id = 0
        self._timestamp_ms = 0
        self._stop_event = Event()
        self._stream = None

    @property
    def config(self) -> AudioConfig:
        return self._config

    def _audio_callback(self, indata, frames, time_info, status) -> None:
        """Called by sounddevice for each audio block."""
        if status:
            logger.warning(f"Audio status: {status}")

        # Channel 0 only; the pipeline is mono.
        self._frame_buffer.append(indata[:, 0].copy().astype(np.float32))

    def _start_stream(self) -> None:
        sd = _import_sounddevice()

        self._stream = sd.InputStream(
            samplerate=self._config.sample_rate,
            blocksize=self._config.samples_per_frame,
            channels=self._config.channels,
            dtype=np.float32,
            device=self._device,
            callback=self._audio_callback,
        )
        self._stream.start()

    def frames(self) -> Iterator[AudioFrame]:
        """
        Yield audio frames from microphone.

        This is a blocking generator that yields frames as they arrive.
        Use Ctrl+C or call close() to stop.
        """
        self._start_stream()

        max_ms = int(self._max_duration_s * 1000) if self._max_duration_s else None

        try:
            while not self._stop_event.is_set():
                if not self._frame_buffer:
                    time.sleep(0.001)
                    continue

                yield AudioFrame(
                    data=self._frame_buffer.popleft(),
                    frame_id=self._frame_id,
                    timestamp_ms=self._timestamp_ms,
                    config=self._config,
                )

                self._frame_id += 1
                self._timestamp_ms += self._config.frame_duration_ms

                if max_ms and self._timestamp_ms >= max_ms:
                    break

        except KeyboardInterrupt:
            pass
        finally:
            self.close()

    def close(self) -> None:
        """Stop recording and clean up."""
        self._stop_event.set()

        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None


def list_audio_devices():
    """Return the device list as reported by sounddevice."""
    return _import_sounddevice().query_devices()

