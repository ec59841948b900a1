"""Output adapters for downstream renderers."""

from mouthsync.adapters.base import Adapter, BlendshapeAdapter, CallbackAdapter, DictAdapter

__all__ = [
    "Adapter",
    "BlendshapeAdapter",
    "CallbackAdapter",
    "DictAdapter",
]
