#!/usr/bin/env python3
"""
mouthsync Microphone Demo

Speak into the microphone and watch the face parameters move.

Usage:
    python examples/microphone_demo.py

Requires:
    pip install sounddevice

Stop with Ctrl+C.
"""

import argparse
import logging

from mouthsync import FacePipeline, PipelineConfig, AudioConfig, GateConfig
from mouthsync.sources import MicrophoneSource, list_audio_devices


def format_bar(value: float, width: int = 20, filled: str = "#", empty: str = ".") -> str:
    """Create a visual bar."""
    filled_count = int(value * width)
    return filled * filled_count + empty * (width - filled_count)


def main() -> None:
    parser = argparse.ArgumentParser(description="Drive a face from your microphone")
    parser.add_argument("--device", default=None, help="Input device index or name")
    parser.add_argument("--list-devices", action="store_true", help="Print audio devices and exit")
    parser.add_argument("--duration", type=float, default=None, help="Stop after N seconds")
    parser.add_argument("--energy-gate", type=float, default=0.018)
    parser.add_argument("--flux-gate", type=float, default=1200.0)
    parser.add_argument("--boost", type=float, default=2.4)
    parser.add_argument("--energy-only", action="store_true", help="Use the energy-only gate")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.list_devices:
        print(list_audio_devices())
        return

    device = int(args.device) if args.device and args.device.isdigit() else args.device
    source = MicrophoneSource(device=device, max_duration_s=args.duration)

    pipeline = FacePipeline(PipelineConfig(
        audio=AudioConfig(sample_rate=source.config.sample_rate),
        gate=GateConfig(energy_threshold=args.energy_gate, flux_threshold=args.flux_gate, boost=args.boost),
        gate_mode="energy" if args.energy_only else "voice",
    ))

    print("Listening... (Ctrl+C to stop)")
    for pose in pipeline.run_sync(source):
        eyes = "-" if pose.eye_openness < 0.5 else "o"
        print(
            f"\r{eyes} {eyes}  open [{format_bar(pose.openness)}]  "
            f"wide [{format_bar(1.0 - pose.shape, 10)}] round",
            end="",
            flush=True,
        )
    print()


if __name__ == "__main__":
    main()
