"""Step 03: Angle between each normal and the horizontal plane.

The angle to the up axis is folded into [0, 90] degrees and turned into an
elevation above the horizontal plane: ~0 for walls, ~90 for floors and roofs.
"""

from __future__ import annotations

import logging
from typing import ClassVar

import numpy as np

from wallseg.core.step_base import BaseStep
from wallseg.utils.geometry import horizontal_angles, up_vector
from .config import HorizontalAnglesConfig
from .contracts import HorizontalAnglesInput, HorizontalAnglesOutput

logger = logging.getLogger(__name__)


class HorizontalAnglesStep(BaseStep[HorizontalAnglesInput, HorizontalAnglesOutput, HorizontalAnglesConfig]):
    name: ClassVar[str] = "horizontal_angles"
    input_type: ClassVar = HorizontalAnglesInput
    output_type: ClassVar = HorizontalAnglesOutput
    config_type: ClassVar = HorizontalAnglesConfig

    def validate_inputs(self, inputs: HorizontalAnglesInput) -> bool:
        if not self._check_cloud():
            return False
        if not self.cloud.has_normals:
            logger.error("Point cloud has no normals; run normal estimation first")
            return False
        return True

    def run(self, inputs: HorizontalAnglesInput) -> HorizontalAnglesOutput:
        cloud = self.cloud
        n = cloud.num_points
        normals = cloud.get_normals()
        up = up_vector(self.config.up_axis)
        angles = np.empty(n, dtype=np.float64)

        for chunk in self.iter_chunks(n, self.config.chunk_size):
            angles[chunk] = horizontal_angles(normals[chunk], up)

        cloud.write_layer(self.config.output_layer, angles)

        mean_angle = float(np.nanmean(angles)) if np.any(np.isfinite(angles)) else 0.0
        logger.info(f"Angles are calculated: layer '{self.config.output_layer}', mean {mean_angle:.1f} deg")
        return HorizontalAnglesOutput(
            angles_layer=self.config.output_layer,
            num_points=n,
            mean_angle=mean_angle,
        )
