"""Configuration for Step 01: Coordinate smoothing."""

from pydantic import BaseModel, Field


class SmoothCloudConfig(BaseModel):
    k_neighbors: int = Field(6, ge=1, description="Nearest neighbours averaged per point (self included)")
    workers: int = Field(1, description="k-d tree query threads (-1 = all cores)")
    chunk_size: int = Field(65536, ge=1, description="Points processed per progress update")
