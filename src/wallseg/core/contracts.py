"""Common Pydantic models shared across pipeline steps."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

# Well-known layer names written and read between steps
HORIZONTAL_ANGLES_LAYER = "Horizontal Angles"
SMOOTHED_ANGLES_LAYER = "Smoothed Angles"
WALL_INDEX_LAYER = "Wall Index"


class StepMeta(BaseModel):
    """Metadata recorded for every executed step."""

    step_name: str
    elapsed_seconds: float = 0.0
    params: dict[str, Any] = Field(default_factory=dict)


class PipelineConfig(BaseModel):
    """Top-level pipeline configuration, in code or loaded from pipeline.yaml."""

    project_name: str = "wallseg"
    steps: list[StepEntry] = Field(default_factory=list)


class StepEntry(BaseModel):
    """One entry in the pipeline step list."""

    name: str
    module: str
    config_file: str | None = None
    params: dict[str, Any] = Field(default_factory=dict, description="Overrides on top of config_file")
    depends_on: list[str] = Field(default_factory=list)
    enabled: bool = True


class PipelineResult(BaseModel):
    """What a pipeline run produced: one meta and one output dump per executed step."""

    project_name: str
    steps: list[StepMeta] = Field(default_factory=list)
    outputs: dict[str, dict[str, Any]] = Field(default_factory=dict)


# Fix forward reference
PipelineConfig.model_rebuild()
