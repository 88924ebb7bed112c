"""Configuration for Step 04: Angle smoothing."""

from typing import Literal

from pydantic import BaseModel, Field

from wallseg.core.contracts import SMOOTHED_ANGLES_LAYER


class SmoothAnglesConfig(BaseModel):
    k_neighbors: int = Field(60, ge=1, description="Nearest neighbours whose normals are averaged")
    up_axis: Literal["x", "y", "z"] = Field("z", description="Vertical axis of the cloud")
    output_layer: str = Field(SMOOTHED_ANGLES_LAYER, description="Layer receiving the smoothed angles")
    workers: int = Field(1, description="k-d tree query threads (-1 = all cores)")
    chunk_size: int = Field(16384, ge=1, description="Points processed per progress update")
