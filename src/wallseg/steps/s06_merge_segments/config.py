"""Configuration for Step 06: Segment merging."""

from pydantic import BaseModel, Field


class MergeSegmentsConfig(BaseModel):
    neighborhood_radius: float = Field(7.0, gt=0, description="Radius of the spherical neighbourhood (scene units)")
    iterations: int = Field(10, ge=0, description="Relaxation rounds, always run in full")

    # Compatibility switches
    legacy_min_index_reset: bool = Field(
        True, description="Start each round with a rolling minimum of 1 (only affects point 0)"
    )
    count_self_as_neighbor: bool = Field(
        False, description="Count the point itself in its neighbourhood (isolated points are then never demoted)"
    )

    workers: int = Field(1, description="k-d tree query threads for the neighbourhood search (-1 = all cores)")
    chunk_size: int = Field(1024, ge=1, description="Points whose neighbourhoods are searched and held at once")
