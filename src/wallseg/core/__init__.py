"""wallseg core: point cloud store, pipeline runner, base step, shared contracts."""

from .point_cloud import PointCloud, Layer
from .step_base import BaseStep, ProgressCallback
from .contracts import (
    PipelineConfig,
    PipelineResult,
    StepEntry,
    StepMeta,
    HORIZONTAL_ANGLES_LAYER,
    SMOOTHED_ANGLES_LAYER,
    WALL_INDEX_LAYER,
)
from .errors import (
    WallSegmentationError,
    LayerLookupError,
    MissingLayerError,
    AmbiguousLayerError,
    CancelledByUserError,
    InvalidInputError,
)
from .pipeline_runner import (
    run_pipeline,
    segment_walls,
    default_pipeline_config,
    load_pipeline_config,
)
from .logging import setup_logging

__all__ = [
    "PointCloud",
    "Layer",
    "BaseStep",
    "ProgressCallback",
    "PipelineConfig",
    "PipelineResult",
    "StepEntry",
    "StepMeta",
    "HORIZONTAL_ANGLES_LAYER",
    "SMOOTHED_ANGLES_LAYER",
    "WALL_INDEX_LAYER",
    "WallSegmentationError",
    "LayerLookupError",
    "MissingLayerError",
    "AmbiguousLayerError",
    "CancelledByUserError",
    "InvalidInputError",
    "run_pipeline",
    "segment_walls",
    "default_pipeline_config",
    "load_pipeline_config",
    "setup_logging",
]
