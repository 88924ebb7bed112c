"""I/O contracts for Step 01: Coordinate smoothing."""

from pydantic import BaseModel, Field


class SmoothCloudInput(BaseModel):
    pass


class SmoothCloudOutput(BaseModel):
    num_points: int = Field(..., description="Number of points smoothed")
    mean_displacement: float = Field(0.0, description="Mean distance a point moved")
    max_displacement: float = Field(0.0, description="Largest distance a point moved")
