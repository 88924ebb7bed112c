"""Error types raised by the wall segmentation pipeline.

All of them abort the current pipeline run. Stages that already finished keep
their writes to the point cloud; nothing is rolled back.
"""

from __future__ import annotations


class WallSegmentationError(Exception):
    """Base class for all pipeline errors."""


class LayerLookupError(WallSegmentationError):
    """A required named layer could not be resolved to exactly one layer."""

    def __init__(self, layer_name: str, count: int, message: str):
        super().__init__(message)
        self.layer_name = layer_name
        self.count = count


class MissingLayerError(LayerLookupError):
    """A required layer does not exist."""

    def __init__(self, layer_name: str):
        super().__init__(layer_name, 0, f"Layer '{layer_name}' not found (0 layers found instead of 1)")


class AmbiguousLayerError(LayerLookupError):
    """More than one layer carries the required name."""

    def __init__(self, layer_name: str, count: int):
        super().__init__(
            layer_name, count, f"Layer '{layer_name}' is ambiguous ({count} layers found instead of 1)"
        )


class CancelledByUserError(WallSegmentationError):
    """The progress callback asked the running stage to stop."""

    def __init__(self, stage: str, fraction: float):
        super().__init__(f"[{stage}] Cancelled by user at {fraction:.0%}")
        self.stage = stage
        self.fraction = fraction


class InvalidInputError(WallSegmentationError, ValueError):
    """The point cloud handle or a stage input is unusable."""
