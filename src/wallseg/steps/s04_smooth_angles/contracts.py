"""I/O contracts for Step 04: Angle smoothing."""

from pydantic import BaseModel, Field

from wallseg.core.contracts import HORIZONTAL_ANGLES_LAYER


class SmoothAnglesInput(BaseModel):
    angles_layer: str = Field(HORIZONTAL_ANGLES_LAYER, description="Layer with the unsmoothed angles")


class SmoothAnglesOutput(BaseModel):
    smoothed_layer: str = Field(..., description="Layer holding the smoothed angles (degrees)")
    num_points: int = Field(...)
    num_unsmoothed: int = Field(
        0, description="Points whose averaged normal cancelled out and kept the unsmoothed angle"
    )
