"""Fixtures for end-to-end pipeline tests."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pytest

from wallseg.core.point_cloud import PointCloud

SPACING = 0.5


def _plane(origin, u, v, nu: int, nv: int) -> np.ndarray:
    """Regular grid origin + i * u + j * v for i < nu, j < nv."""
    i, j = np.meshgrid(np.arange(nu), np.arange(nv), indexing="ij")
    return (
        np.asarray(origin, dtype=float)
        + i.ravel()[:, None] * np.asarray(u, dtype=float)
        + j.ravel()[:, None] * np.asarray(v, dtype=float)
    )


@dataclass
class SyntheticScene:
    cloud: PointCloud
    parts: dict[str, slice]


@pytest.fixture
def synthetic_scene() -> SyntheticScene:
    """Three walls, a floor and a 45 degree roof, far apart from each other.

    Wall "split" is one wall with a 3-unit gap in the middle. Everything is
    sampled on a 0.5 grid.
    """
    dy = (0.0, SPACING, 0.0)
    dz = (0.0, 0.0, SPACING)
    pieces = {
        "wall_a": _plane((0.0, 0.0, 0.0), dy, dz, 41, 21),
        "wall_b": _plane((100.0, 0.0, 0.0), dy, dz, 41, 21),
        "split_left": _plane((50.0, 0.0, 0.0), dy, dz, 21, 21),
        "split_right": _plane((50.0, 13.0, 0.0), dy, dz, 21, 21),
        "floor": _plane((200.0, 0.0, 0.0), (SPACING, 0.0, 0.0), dy, 41, 41),
        "roof": _plane((300.0, 0.0, 0.0), (SPACING, 0.0, SPACING), dy, 21, 21),
    }

    parts: dict[str, slice] = {}
    start = 0
    for name, pts in pieces.items():
        parts[name] = slice(start, start + len(pts))
        start += len(pts)

    cloud = PointCloud(np.vstack(list(pieces.values())))
    return SyntheticScene(cloud=cloud, parts=parts)
