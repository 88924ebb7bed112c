"""I/O contracts for Step 02: Normal estimation."""

from pydantic import BaseModel, Field


class EstimateNormalsInput(BaseModel):
    pass


class EstimateNormalsOutput(BaseModel):
    num_points: int = Field(..., description="Number of normals written")
    num_underdetermined: int = Field(
        0, description="Points whose neighbourhood had fewer than 3 points (plane not determined)"
    )
