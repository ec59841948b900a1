"""
mouthsync Basic Usage Example

Demonstrates core pipeline usage with synthetic audio.
"""

import json

from mouthsync import FacePipeline, PipelineConfig, AudioConfig, GateConfig
from mouthsync.adapters import BlendshapeAdapter, DictAdapter
from mouthsync.sources import BurstSource, SilenceSource


def create_default_pipeline() -> FacePipeline:
    """Create a pipeline with the default voice gate and envelope settings."""
    config = PipelineConfig(
        audio=AudioConfig(sample_rate=16000, frame_duration_ms=20),
        gate=GateConfig(energy_threshold=0.018, flux_threshold=1200, min_sustain_ms=50, boost=2.4),
        attack_s=0.05,
        release_s=0.15,
        seed=0,
    )
    return FacePipeline(config)


def bar(value: float, width: int = 30) -> str:
    filled = int(value * width)
    return "#" * filled + "." * (width - filled)


def example_sync_processing():
    """Synchronous processing example."""
    print("=" * 60)
    print("Synchronous Processing Example")
    print("=" * 60)

    pipeline = create_default_pipeline()
    source = BurstSource(burst_ms=200, gap_ms=150, bursts=4, seed=1)

    for pose in pipeline.run_sync(source):
        print(f"[{pose.timestamp_ms:5d}ms] open {bar(pose.openness)} shape={pose.shape:.2f} blink={pose.blink:.2f}")

    print()


def example_callback_processing():
    """Callback-based processing with an output adapter."""
    print("=" * 60)
    print("Callback Processing Example")
    print("=" * 60)

    adapter = BlendshapeAdapter()

    def on_pose(pose):
        if pose.is_speaking:
            weights = adapter.transform(pose)
            print(f"[{pose.timestamp_ms}ms] jawOpen={weights['jawOpen']:.2f} mouthFunnel={weights['mouthFunnel']:.2f}")

    pipeline = create_default_pipeline().on_pose(on_pose)
    list(pipeline.run_sync(BurstSource(burst_ms=160, gap_ms=100, bursts=2, seed=2)))

    print()


def example_live_tuning():
    """Change gate settings between ticks."""
    print("=" * 60)
    print("Live Tuning Example")
    print("=" * 60)

    pipeline = create_default_pipeline()
    for label, settings in [
        ("default", {}),
        ("strict", {"energy_threshold": 0.08, "flux_threshold": 4000}),
        ("loose", {"energy_threshold": 0.005, "flux_threshold": 600, "min_sustain_ms": 0, "boost": 4.0}),
    ]:
        pipeline.reset()
        pipeline.configure(**settings)
        poses = list(pipeline.run_sync(BurstSource(bursts=3, seed=3)))
        peak = max(p.openness for p in poses)
        print(f"{label:>8}: peak openness {peak:.2f}  {json.dumps(pipeline.settings())}")

    print()


def example_silence():
    """Silence keeps the mouth shut."""
    pipeline = create_default_pipeline()
    adapter = DictAdapter()
    last = None
    for pose in pipeline.run_sync(SilenceSource(duration_ms=500)):
        last = adapter.transform(pose)
    print(f"After 500ms of silence: {json.dumps(last)}")


if __name__ == "__main__":
    example_sync_processing()
    example_callback_processing()
    example_live_tuning()
    example_silence()
