"""Pipeline orchestrator: runs the configured steps in order on one point cloud."""

from __future__ import annotations

import importlib
import logging
from pathlib import Path

import numpy as np
import yaml
from pydantic import BaseModel

from .contracts import PipelineConfig, PipelineResult, StepEntry, WALL_INDEX_LAYER
from .errors import InvalidInputError
from .point_cloud import PointCloud
from .step_base import ProgressCallback

logger = logging.getLogger(__name__)

DEFAULT_STEPS: list[tuple[str, str, list[str]]] = [
    ("smooth_cloud", "wallseg.steps.s01_smooth_cloud", []),
    ("estimate_normals", "wallseg.steps.s02_estimate_normals", ["smooth_cloud"]),
    ("horizontal_angles", "wallseg.steps.s03_horizontal_angles", ["estimate_normals"]),
    ("smooth_angles", "wallseg.steps.s04_smooth_angles", ["horizontal_angles"]),
    ("initial_segments", "wallseg.steps.s05_initial_segments", ["smooth_angles"]),
    ("merge_segments", "wallseg.steps.s06_merge_segments", ["initial_segments"]),
]


def default_pipeline_config(neighborhood_radius: float = 7.0) -> PipelineConfig:
    """The six-step wall segmentation pipeline with default parameters."""
    steps = [
        StepEntry(name=name, module=module, depends_on=list(deps))
        for name, module, deps in DEFAULT_STEPS
    ]
    steps[-1].params["neighborhood_radius"] = neighborhood_radius
    return PipelineConfig(steps=steps)


def load_pipeline_config(config_path: Path) -> PipelineConfig:
    """Load and validate pipeline.yaml."""
    with open(config_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    return PipelineConfig(**raw)


def load_step_config(config_path: Path, config_class: type[BaseModel]) -> BaseModel:
    """Load a step-specific YAML config into its Pydantic model."""
    with open(config_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    return config_class(**raw)


def build_step_config(entry: StepEntry, config_class: type[BaseModel]) -> BaseModel:
    """Step config from its YAML file (if any) with inline params on top."""
    raw: dict = {}
    if entry.config_file:
        raw.update(load_step_config(Path(entry.config_file), config_class).model_dump())
    raw.update(entry.params)
    return config_class(**raw)


def import_step_class(module_path: str):
    """Dynamically import a step class from its module path.

    Expects module_path like 'wallseg.steps.s01_smooth_cloud'
    and looks for a class ending in 'Step' in that module's step.py.
    """
    step_module = importlib.import_module(f"{module_path}.step")
    for attr_name in dir(step_module):
        attr = getattr(step_module, attr_name)
        if (
            isinstance(attr, type)
            and hasattr(attr, "run")
            and attr_name.endswith("Step")
            and attr_name != "BaseStep"
        ):
            return attr
    raise ImportError(f"No Step class found in {module_path}.step")


def run_pipeline(
    cloud: PointCloud,
    pipeline_cfg: PipelineConfig | None = None,
    progress: ProgressCallback | None = None,
) -> PipelineResult:
    """Execute the configured steps on ``cloud``.

    The cloud is modified in place: positions, normals and layers written by
    finished steps stay even if a later step fails.
    """
    if not isinstance(cloud, PointCloud):
        raise InvalidInputError(f"Expected a PointCloud, got {type(cloud).__name__}")
    if pipeline_cfg is None:
        pipeline_cfg = default_pipeline_config()

    results: dict[str, BaseModel] = {}
    result = PipelineResult(project_name=pipeline_cfg.project_name)

    enabled_steps = [s for s in pipeline_cfg.steps if s.enabled]
    logger.info(
        f"Pipeline '{pipeline_cfg.project_name}' with {len(enabled_steps)} steps "
        f"on {cloud.num_points} points"
    )

    for i, entry in enumerate(enabled_steps, 1):
        logger.info(f"--- Step {i}/{len(enabled_steps)}: {entry.name} ---")

        step_cls = import_step_class(entry.module)
        step_config = build_step_config(entry, step_cls.config_type)
        step_instance = step_cls(config=step_config, cloud=cloud, progress=progress)

        # Build input from previous step outputs or defaults
        input_data = {}
        if entry.depends_on:
            for dep in entry.depends_on:
                if dep in results:
                    input_data.update(results[dep].model_dump())

        step_input = step_cls.input_type(**input_data) if input_data else step_cls.input_type()
        output = step_instance.execute(step_input)
        results[entry.name] = output
        result.steps.append(step_instance.meta)
        result.outputs[entry.name] = output.model_dump()

    logger.info("Pipeline complete.")
    return result


def segment_walls(
    cloud: PointCloud,
    neighborhood_radius: float = 7.0,
    progress: ProgressCallback | None = None,
) -> np.ndarray:
    """Run the default pipeline and return the final wall label per point."""
    run_pipeline(cloud, default_pipeline_config(neighborhood_radius), progress)
    return cloud.get_layer_values(WALL_INDEX_LAYER).astype(np.int64)
