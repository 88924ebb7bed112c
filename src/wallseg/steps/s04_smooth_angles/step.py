"""Step 04: Angle smoothing over a wide neighbourhood.

For each point the normals of its k nearest neighbours (by the smoothed
positions) are averaged, the horizontal angle of that mean normal is computed
with the same folding as step 03, and the result is blended 50/50 with the
point's own unsmoothed angle.

Normals are not oriented, so opposite normals on one surface partly cancel in
the average. When the mean normal cancels out completely the point keeps its own angle.
"""

from __future__ import annotations

import logging
from typing import ClassVar

import numpy as np

from wallseg.core.step_base import BaseStep
from wallseg.utils.geometry import horizontal_angles, neighborhood_mean, up_vector
from .config import SmoothAnglesConfig
from .contracts import SmoothAnglesInput, SmoothAnglesOutput

logger = logging.getLogger(__name__)


class SmoothAnglesStep(BaseStep[SmoothAnglesInput, SmoothAnglesOutput, SmoothAnglesConfig]):
    name: ClassVar[str] = "smooth_angles"
    input_type: ClassVar = SmoothAnglesInput
    output_type: ClassVar = SmoothAnglesOutput
    config_type: ClassVar = SmoothAnglesConfig

    def validate_inputs(self, inputs: SmoothAnglesInput) -> bool:
        if not self._check_cloud():
            return False
        if not self.cloud.has_normals:
            logger.error("Point cloud has no normals; run normal estimation first")
            return False
        # Raises MissingLayerError / AmbiguousLayerError
        self.cloud.get_layer(inputs.angles_layer)
        return True

    def run(self, inputs: SmoothAnglesInput) -> SmoothAnglesOutput:
        cloud = self.cloud
        n = cloud.num_points
        original = cloud.get_layer_values(cloud.get_layer(inputs.angles_layer))
        positions = cloud.get_positions()
        normals = cloud.get_normals()
        up = up_vector(self.config.up_axis)
        smoothed = np.empty(n, dtype=np.float64)
        num_unsmoothed = 0

        for chunk in self.iter_chunks(n, self.config.chunk_size):
            idx = cloud.find_k_nearest(positions[chunk], self.config.k_neighbors, workers=self.config.workers)
            recomputed = horizontal_angles(neighborhood_mean(normals, idx), up)
            own = original[chunk]
            # Zero-length mean normal: no direction, keep the unsmoothed angle
            undefined = np.isnan(recomputed)
            num_unsmoothed += int(undefined.sum())
            recomputed = np.where(undefined, own, recomputed)
            smoothed[chunk] = (recomputed + own) / 2.0

        cloud.write_layer(self.config.output_layer, smoothed)
        logger.info(
            f"Angles are now smoothed: layer '{self.config.output_layer}' "
            f"({self.config.k_neighbors} neighbours)"
        )
        return SmoothAnglesOutput(
            smoothed_layer=self.config.output_layer,
            num_points=n,
            num_unsmoothed=num_unsmoothed,
        )
