"""Label relaxation: merge wall labels across spherical neighbourhoods.

Algorithm (one round):
1. Visit points in index order, skipping points labelled 0
2. Collect the labels of the point's radius neighbours
3. If any neighbour label is nonzero, shrink the point's label to the smallest
   nonzero neighbour label (never grow it)
4. Otherwise demote the point to 0
5. Write the new label straight into the array being read, so later points in
   the same round already see it

Because of step 5 a label can travel further than one radius per round. The
caller runs a fixed number of rounds; there is no convergence check.

Neighbourhoods are searched one chunk of consecutive points at a time and
dropped once the chunk is relaxed, so memory is bounded by the chunk size and
not by the cloud size.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import numpy as np

from wallseg.core.point_cloud import PointCloud

logger = logging.getLogger(__name__)


def build_neighborhoods(
    cloud: PointCloud,
    labels: np.ndarray,
    radius: float,
    *,
    indices: np.ndarray | None = None,
    count_self: bool = False,
    workers: int = 1,
) -> list[np.ndarray | None]:
    """Radius neighbourhoods of the currently labelled points among ``indices``.

    Returns one entry per index (all points when ``indices`` is None); entries
    for unlabelled points are None.
    """
    if indices is None:
        indices = np.arange(len(labels))
    indices = np.asarray(indices, dtype=np.intp)
    neighborhoods: list[np.ndarray | None] = [None] * len(indices)

    slots = np.flatnonzero(labels[indices])
    if len(slots) == 0:
        return neighborhoods

    active = indices[slots]
    found = cloud.find_within_radius(cloud.get_positions(active), radius, workers=workers)
    for slot, i, nb in zip(slots, active, found):
        if not count_self:
            nb = nb[nb != i]
        neighborhoods[int(slot)] = nb
    return neighborhoods


def relax_labels(
    labels: np.ndarray,
    neighborhoods: list[np.ndarray | None],
    *,
    start: int = 0,
    legacy_min_index_reset: bool = True,
) -> int:
    """Relax the points ``start .. start + len(neighborhoods)`` in place.

    With ``legacy_min_index_reset`` the rolling minimum starts the round at 1
    and is reset to the point count after each point. Only point 0 is
    affected: if it is labelled and has a labelled neighbour it becomes 1.
    Otherwise the rolling minimum is reset before every point.

    Returns:
        Number of points whose label changed.
    """
    sentinel = len(labels)
    min_index = 1 if legacy_min_index_reset and start == 0 else sentinel
    changed = 0

    for offset, nb in enumerate(neighborhoods):
        i = start + offset
        if not legacy_min_index_reset:
            min_index = sentinel
        current = labels[i]
        if current != 0:
            nb_labels = labels[nb]
            nonzero = nb_labels[nb_labels != 0]
            if len(nonzero):
                found = min(min_index, int(nonzero.min()))
                if current > found:
                    labels[i] = found
                    changed += 1
            else:
                labels[i] = 0
                changed += 1
        min_index = sentinel

    return changed


def relax_round(
    cloud: PointCloud,
    labels: np.ndarray,
    radius: float,
    *,
    chunk_size: int,
    count_self: bool = False,
    legacy_min_index_reset: bool = True,
    workers: int = 1,
    on_chunk: Callable[[int], None] | None = None,
) -> int:
    """One full relaxation round, searching neighbourhoods chunk by chunk.

    ``on_chunk`` is called with the end index of every finished chunk.

    Returns:
        Number of points whose label changed.
    """
    n = len(labels)
    changed = 0
    for start in range(0, n, chunk_size):
        stop = min(start + chunk_size, n)
        neighborhoods = build_neighborhoods(
            cloud, labels, radius, indices=np.arange(start, stop), count_self=count_self, workers=workers
        )
        changed += relax_labels(
            labels, neighborhoods, start=start, legacy_min_index_reset=legacy_min_index_reset
        )
        if on_chunk is not None:
            on_chunk(stop)
    return changed
