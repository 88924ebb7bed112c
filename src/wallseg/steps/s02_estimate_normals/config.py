"""Configuration for Step 02: Normal estimation."""

from pydantic import BaseModel, Field


class EstimateNormalsConfig(BaseModel):
    k_neighbors: int = Field(10, ge=3, description="Nearest neighbours used for the plane fit")
    workers: int = Field(1, description="k-d tree query threads (-1 = all cores)")
    chunk_size: int = Field(65536, ge=1, description="Points processed per progress update")
