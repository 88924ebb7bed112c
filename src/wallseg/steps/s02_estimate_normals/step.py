"""Step 02: Per-point normal estimation by local plane fitting.

For each point the k nearest neighbours are fitted with a total-least-squares
plane (smallest principal axis of the neighbourhood covariance). The plane
normal becomes the point normal.

Normals are not oriented: their sign is whatever the decomposition returns,
so neighbouring normals on the same surface may point to opposite sides.
"""

from __future__ import annotations

import logging
from typing import ClassVar

import numpy as np

from wallseg.core.step_base import BaseStep
from wallseg.utils.geometry import fit_plane_normals
from .config import EstimateNormalsConfig
from .contracts import EstimateNormalsInput, EstimateNormalsOutput

logger = logging.getLogger(__name__)


class EstimateNormalsStep(BaseStep[EstimateNormalsInput, EstimateNormalsOutput, EstimateNormalsConfig]):
    name: ClassVar[str] = "estimate_normals"
    input_type: ClassVar = EstimateNormalsInput
    output_type: ClassVar = EstimateNormalsOutput
    config_type: ClassVar = EstimateNormalsConfig

    def validate_inputs(self, inputs: EstimateNormalsInput) -> bool:
        return self._check_cloud()

    def run(self, inputs: EstimateNormalsInput) -> EstimateNormalsOutput:
        cloud = self.cloud
        n = cloud.num_points
        positions = cloud.get_positions()
        normals = np.empty((n, 3), dtype=np.float64)

        for chunk in self.iter_chunks(n, self.config.chunk_size):
            idx = cloud.find_k_nearest(positions[chunk], self.config.k_neighbors, workers=self.config.workers)
            normals[chunk] = fit_plane_normals(positions[idx])

        cloud.set_normals(normals)

        k_used = min(self.config.k_neighbors, n)
        num_underdetermined = n if k_used < 3 else 0
        if num_underdetermined:
            logger.warning(f"Only {n} points in cloud: normals are not well defined")
        logger.info(f"Normal vectors calculated successfully for {n} points (k={k_used})")
        return EstimateNormalsOutput(num_points=n, num_underdetermined=num_underdetermined)
