"""I/O contracts for Step 03: Horizontal angle computation."""

from pydantic import BaseModel, Field


class HorizontalAnglesInput(BaseModel):
    pass


class HorizontalAnglesOutput(BaseModel):
    angles_layer: str = Field(..., description="Layer holding the per-point angle (degrees)")
    num_points: int = Field(...)
    mean_angle: float = Field(0.0, description="Mean angle over all points (degrees)")
