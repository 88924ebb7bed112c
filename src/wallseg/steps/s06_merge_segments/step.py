"""Step 06: Segment merging by iterative spatial relaxation.

Starting from one label per wall point, every round shrinks each labelled
point's label to the smallest nonzero label within ``neighborhood_radius`` and
drops points that have no labelled neighbour. Labels are updated in place in
index order, so a round can carry a label across many neighbourhoods. Exactly
``iterations`` rounds are run.

After merging, points that share a nonzero label belong to the same wall
patch. Labels are neither contiguous nor renumbered.
"""

from __future__ import annotations

import logging
from typing import ClassVar

import numpy as np

from wallseg.core.step_base import BaseStep
from .config import MergeSegmentsConfig
from .contracts import MergeSegmentsInput, MergeSegmentsOutput
from ._relaxation import relax_round

logger = logging.getLogger(__name__)


def summarize_segments(labels: np.ndarray) -> dict[int, int]:
    """Point count per nonzero label, largest segment first."""
    values, counts = np.unique(np.asarray(labels).astype(np.int64), return_counts=True)
    keep = values != 0
    order = np.argsort(-counts[keep], kind="stable")
    return {int(v): int(c) for v, c in zip(values[keep][order], counts[keep][order])}


class MergeSegmentsStep(BaseStep[MergeSegmentsInput, MergeSegmentsOutput, MergeSegmentsConfig]):
    name: ClassVar[str] = "merge_segments"
    input_type: ClassVar = MergeSegmentsInput
    output_type: ClassVar = MergeSegmentsOutput
    config_type: ClassVar = MergeSegmentsConfig

    def validate_inputs(self, inputs: MergeSegmentsInput) -> bool:
        if not self._check_cloud():
            return False
        self.cloud.get_layer(inputs.labels_layer)
        return True

    def run(self, inputs: MergeSegmentsInput) -> MergeSegmentsOutput:
        cloud = self.cloud
        layer = cloud.get_layer(inputs.labels_layer)
        labels = cloud.get_layer_values(layer).astype(np.int64)
        initially_labelled = int(np.count_nonzero(labels))
        n = len(labels)
        iterations = self.config.iterations

        try:
            for round_idx in range(iterations):
                changed = relax_round(
                    cloud,
                    labels,
                    self.config.neighborhood_radius,
                    chunk_size=self.config.chunk_size,
                    count_self=self.config.count_self_as_neighbor,
                    legacy_min_index_reset=self.config.legacy_min_index_reset,
                    workers=self.config.workers,
                    on_chunk=lambda stop: self.report_progress((round_idx + stop / n) / iterations),
                )
                logger.debug(f"Round {round_idx + 1}/{iterations}: {changed} labels changed")
        finally:
            # Layer holds every relaxed point, even if the round was cancelled halfway
            cloud.set_layer_values(layer, labels.astype(np.float64))

        segments = summarize_segments(labels)
        num_wall_points = int(np.count_nonzero(labels))
        num_demoted = initially_labelled - num_wall_points
        logger.info(
            f"Wall segmentation is done: {len(segments)} segments, {num_wall_points} wall points, "
            f"{num_demoted} isolated points dropped ({iterations} rounds, "
            f"radius {self.config.neighborhood_radius})"
        )
        return MergeSegmentsOutput(
            labels_layer=inputs.labels_layer,
            num_segments=len(segments),
            num_wall_points=num_wall_points,
            num_demoted=num_demoted,
            iterations=iterations,
        )
