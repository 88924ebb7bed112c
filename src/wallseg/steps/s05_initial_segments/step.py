"""Step 05: Initial wall labels from the smoothed angle.

Points are visited in index order. A point whose smoothed angle is at most the
threshold gets a fresh label (1, 2, 3, ...); every other point gets 0. Each
wall point starts as its own segment; step 06 merges them.
"""

from __future__ import annotations

import logging
from typing import ClassVar

import numpy as np

from wallseg.core.step_base import BaseStep
from .config import InitialSegmentsConfig
from .contracts import InitialSegmentsInput, InitialSegmentsOutput

logger = logging.getLogger(__name__)


def initial_labels(angles: np.ndarray, angle_threshold: float) -> np.ndarray:
    """Fresh increasing label per qualifying point in index order, 0 elsewhere.

    NaN angles never qualify.
    """
    angles = np.asarray(angles, dtype=np.float64)
    is_wall = angles <= angle_threshold
    labels = np.zeros(len(angles), dtype=np.int64)
    labels[is_wall] = np.arange(1, int(is_wall.sum()) + 1)
    return labels


class InitialSegmentsStep(BaseStep[InitialSegmentsInput, InitialSegmentsOutput, InitialSegmentsConfig]):
    name: ClassVar[str] = "initial_segments"
    input_type: ClassVar = InitialSegmentsInput
    output_type: ClassVar = InitialSegmentsOutput
    config_type: ClassVar = InitialSegmentsConfig

    def validate_inputs(self, inputs: InitialSegmentsInput) -> bool:
        if not self._check_cloud():
            return False
        self.cloud.get_layer(inputs.smoothed_layer)
        return True

    def run(self, inputs: InitialSegmentsInput) -> InitialSegmentsOutput:
        cloud = self.cloud
        angles = cloud.get_layer_values(cloud.get_layer(inputs.smoothed_layer))
        labels = initial_labels(angles, self.config.angle_threshold)
        self.report_progress(1.0)

        cloud.write_layer(self.config.output_layer, labels.astype(np.float64))

        num_wall_points = int(np.count_nonzero(labels))
        logger.info(
            f"Initial values are set: {num_wall_points}/{cloud.num_points} points "
            f"at or below {self.config.angle_threshold:.1f} deg"
        )
        return InitialSegmentsOutput(labels_layer=self.config.output_layer, num_wall_points=num_wall_points)
