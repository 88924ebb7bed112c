"""Shared pytest fixtures for wallseg tests."""

import numpy as np
import pytest

from wallseg.core.point_cloud import PointCloud


def grid_points(nx: int, ny: int, spacing: float = 1.0) -> np.ndarray:
    """(nx * ny, 2) regular grid coordinates, row-major."""
    xs, ys = np.meshgrid(np.arange(nx) * spacing, np.arange(ny) * spacing, indexing="ij")
    return np.column_stack([xs.ravel(), ys.ravel()])


def vertical_wall(x: float, y_range: tuple[float, float], z_range: tuple[float, float],
                  spacing: float = 0.5) -> np.ndarray:
    """Points on the plane x = const, sampled on a regular y/z grid."""
    ys = np.arange(y_range[0], y_range[1] + 1e-9, spacing)
    zs = np.arange(z_range[0], z_range[1] + 1e-9, spacing)
    yy, zz = np.meshgrid(ys, zs, indexing="ij")
    return np.column_stack([np.full(yy.size, x), yy.ravel(), zz.ravel()])


def horizontal_patch(x_range: tuple[float, float], y_range: tuple[float, float], z: float,
                     spacing: float = 0.5) -> np.ndarray:
    """Points on the plane z = const, sampled on a regular x/y grid."""
    xs = np.arange(x_range[0], x_range[1] + 1e-9, spacing)
    ys = np.arange(y_range[0], y_range[1] + 1e-9, spacing)
    xx, yy = np.meshgrid(xs, ys, indexing="ij")
    return np.column_stack([xx.ravel(), yy.ravel(), np.full(xx.size, z)])


@pytest.fixture
def flat_grid_cloud() -> PointCloud:
    """9x9 unit grid in the z=0 plane."""
    xy = grid_points(9, 9)
    return PointCloud(np.column_stack([xy, np.zeros(len(xy))]))


@pytest.fixture
def random_cloud() -> PointCloud:
    """300 points scattered in a 20-unit cube (no distance ties)."""
    rng = np.random.default_rng(7)
    return PointCloud(rng.uniform(0, 20, (300, 3)))


@pytest.fixture
def wall_cloud() -> PointCloud:
    """A single 10 x 5 vertical wall at x = 2."""
    return PointCloud(vertical_wall(2.0, (0.0, 10.0), (0.0, 5.0)))


@pytest.fixture
def recording_progress():
    """Progress callback that records every fraction and never cancels."""
    calls: list[float] = []

    def callback(fraction: float) -> bool:
        calls.append(fraction)
        return True

    callback.calls = calls
    return callback
