"""I/O contracts for Step 05: Initial segment labels."""

from pydantic import BaseModel, Field

from wallseg.core.contracts import SMOOTHED_ANGLES_LAYER


class InitialSegmentsInput(BaseModel):
    smoothed_layer: str = Field(SMOOTHED_ANGLES_LAYER, description="Layer with the smoothed angles")


class InitialSegmentsOutput(BaseModel):
    labels_layer: str = Field(..., description="Layer holding the initial labels (0 = not a wall)")
    num_wall_points: int = Field(0, description="Points that received a nonzero label")
