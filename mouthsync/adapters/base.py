"""
Base adapter protocol.

Adapters transform AnimationPoses for whatever draws the face.
mouthsync does not render anything itself.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, TypeVar

from mouthsync.core.pose import AnimationPose


T = TypeVar("T")


class Adapter(ABC, Generic[T]):
    """
    Abstract base for output adapters.

    Usage:
        class MyAdapter(Adapter[MyOutputType]):
            def transform(self, pose: AnimationPose) -> MyOutputType:
                return MyOutputType(...)

        pipeline.on_pose(lambda pose: send(adapter.transform(pose)))
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique adapter name."""
        ...

    @abstractmethod
    def transform(self, pose: AnimationPose) -> T:
        """
        Transform an AnimationPose to target format.

        Args:
            pose: The AnimationPose to transform

        Returns:
            Transformed output in target format
        """
        ...

    def batch_transform(self, poses: list[AnimationPose]) -> list[T]:
        """Transform multiple poses. Override for optimization."""
        return [self.transform(p) for p in poses]


class DictAdapter(Adapter[dict[str, Any]]):
    """
    Simple adapter that converts AnimationPose to dictionary.

    Useful for JSON serialization or simple integrations.
    """

    @property
    def name(self) -> str:
        return "dict"

    def transform(self, pose: AnimationPose) -> dict[str, Any]:
        data = pose.to_dict()
        data["is_speaking"] = pose.is_speaking
        data["eye_openness"] = pose.eye_openness
        return data


class BlendshapeAdapter(Adapter[dict[str, float]]):
    """
    Maps a pose onto ARKit-style blendshape weights.

    - jawOpen follows openness
    - round shapes funnel/pucker the lips, wide shapes stretch them
    - both eyes blink together

    Parameters:
        jaw_gain: Scale applied to openness for jawOpen (default 1.0)
        round_gain: Lip narrowing at fully round shape (default 0.28)
    """

    def __init__(self, jaw_gain: float = 1.0, round_gain: float = 0.28) -> None:
        self._jaw_gain = jaw_gain
        self._round_gain = round_gain

    @property
    def name(self) -> str:
        return "blendshape"

    def transform(self, pose: AnimationPose) -> dict[str, float]:
        jaw = min(1.0, pose.openness * self._jaw_gain)
        stretch = (1.0 - pose.shape) * jaw * 0.5
        blink = 1.0 - pose.eye_openness

        return {
            "jawOpen": jaw,
            "mouthFunnel": pose.shape * jaw,
            "mouthPucker": pose.shape * self._round_gain,
            "mouthStretchLeft": stretch,
            "mouthStretchRight": stretch,
            "eyeBlinkLeft": blink,
            "eyeBlinkRight": blink,
        }


class CallbackAdapter(Adapter[None]):
    """
    Adapter that invokes a callback for each pose.

    Useful for event-driven architectures.
    """

    def __init__(self, callback: Callable[[AnimationPose], None]) -> None:
        self._callback = callback

    @property
    def name(self) -> str:
        return "callback"

    def transform(self, pose: AnimationPose) -> None:
        self._callback(pose)
