"""Configuration for Step 03: Horizontal angle computation."""

from typing import Literal

from pydantic import BaseModel, Field

from wallseg.core.contracts import HORIZONTAL_ANGLES_LAYER


class HorizontalAnglesConfig(BaseModel):
    up_axis: Literal["x", "y", "z"] = Field("z", description="Vertical axis of the cloud")
    output_layer: str = Field(HORIZONTAL_ANGLES_LAYER, description="Layer receiving the angles")
    chunk_size: int = Field(65536, ge=1, description="Points processed per progress update")
