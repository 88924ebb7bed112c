"""Step 01: Coordinate smoothing by k-nearest-neighbour averaging.

Every point moves to the mean position of its k nearest neighbours (itself
included). Neighbours are searched on the positions as they were when the step
started and the new positions are committed only after the full pass, so the
result does not depend on processing order.
"""

from __future__ import annotations

import logging
from typing import ClassVar

import numpy as np

from wallseg.core.step_base import BaseStep
from wallseg.utils.geometry import neighborhood_mean
from .config import SmoothCloudConfig
from .contracts import SmoothCloudInput, SmoothCloudOutput

logger = logging.getLogger(__name__)


class SmoothCloudStep(BaseStep[SmoothCloudInput, SmoothCloudOutput, SmoothCloudConfig]):
    name: ClassVar[str] = "smooth_cloud"
    input_type: ClassVar = SmoothCloudInput
    output_type: ClassVar = SmoothCloudOutput
    config_type: ClassVar = SmoothCloudConfig

    def validate_inputs(self, inputs: SmoothCloudInput) -> bool:
        return self._check_cloud()

    def run(self, inputs: SmoothCloudInput) -> SmoothCloudOutput:
        cloud = self.cloud
        n = cloud.num_points
        snapshot = cloud.get_positions()
        smoothed = snapshot.copy()

        for chunk in self.iter_chunks(n, self.config.chunk_size):
            idx = cloud.find_k_nearest(snapshot[chunk], self.config.k_neighbors, workers=self.config.workers)
            smoothed[chunk] = neighborhood_mean(snapshot, idx)

        cloud.set_positions(smoothed)

        displacement = np.linalg.norm(smoothed - snapshot, axis=1)
        logger.info(
            f"Point cloud is now smoothed: {n} points, "
            f"mean shift {displacement.mean():.4f}, max shift {displacement.max():.4f}"
        )
        return SmoothCloudOutput(
            num_points=n,
            mean_displacement=float(displacement.mean()),
            max_displacement=float(displacement.max()),
        )
