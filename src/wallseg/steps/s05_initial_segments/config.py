"""Configuration for Step 05: Initial segment labels."""

from pydantic import BaseModel, Field

from wallseg.core.contracts import WALL_INDEX_LAYER


class InitialSegmentsConfig(BaseModel):
    angle_threshold: float = Field(
        30.0, ge=0.0, le=90.0, description="Max smoothed angle (degrees) for a point to count as wall"
    )
    output_layer: str = Field(WALL_INDEX_LAYER, description="Layer receiving the segment labels")
