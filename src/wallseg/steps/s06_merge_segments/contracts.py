"""I/O contracts for Step 06: Segment merging."""

from pydantic import BaseModel, Field

from wallseg.core.contracts import WALL_INDEX_LAYER


class MergeSegmentsInput(BaseModel):
    labels_layer: str = Field(WALL_INDEX_LAYER, description="Layer with the labels to merge (updated in place)")


class MergeSegmentsOutput(BaseModel):
    labels_layer: str = Field(..., description="Layer holding the final labels (0 = not a wall)")
    num_segments: int = Field(0, description="Distinct nonzero labels after merging")
    num_wall_points: int = Field(0, description="Points with a nonzero label after merging")
    num_demoted: int = Field(0, description="Labelled points reset to 0 for lack of labelled neighbours")
    iterations: int = Field(0, description="Relaxation rounds run")
