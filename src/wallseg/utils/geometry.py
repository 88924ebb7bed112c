"""3D geometry utilities: vector angles, verticality folding, plane fitting."""

from __future__ import annotations

import logging

import numpy as np

logger = logging.getLogger(__name__)

_AXES = {
    "x": np.array([1.0, 0.0, 0.0]),
    "y": np.array([0.0, 1.0, 0.0]),
    "z": np.array([0.0, 0.0, 1.0]),
}


def up_vector(axis: str = "z") -> np.ndarray:
    """Unit vector for an up-axis name ('x', 'y' or 'z')."""
    try:
        return _AXES[axis.lower()].copy()
    except KeyError:
        raise ValueError(f"Unknown up axis: {axis!r}") from None


def vector_angles_deg(vectors: np.ndarray, reference: np.ndarray) -> np.ndarray:
    """Angle in degrees between each row of ``vectors`` and ``reference``.

    Zero-length rows have no direction and yield NaN.
    """
    v = np.asarray(vectors, dtype=np.float64).reshape(-1, 3)
    ref = np.asarray(reference, dtype=np.float64)
    norms = np.linalg.norm(v, axis=1) * np.linalg.norm(ref)
    angles = np.full(len(v), np.nan)
    valid = norms > 1e-12
    cos = np.clip((v[valid] @ ref) / norms[valid], -1.0, 1.0)
    angles[valid] = np.degrees(np.arccos(cos))
    return angles


def horizontal_angles(normals: np.ndarray, up: np.ndarray | None = None) -> np.ndarray:
    """Elevation of each normal above the horizontal plane, in [0, 90] degrees.

    The angle to the up vector is folded into [0, 90] (a downward normal scores
    like an upward one) and then measured from the horizontal plane instead.
    Floors and roofs score ~90, walls ~0.
    """
    if up is None:
        up = _AXES["z"]
    theta = vector_angles_deg(normals, up)
    theta = np.where(theta > 90.0, 180.0 - theta, theta)
    return 90.0 - theta


def neighborhood_mean(values: np.ndarray, neighbor_idx: np.ndarray) -> np.ndarray:
    """Mean of ``values`` over each row of a (M, k) neighbour index array.

    Rows with no neighbours (k == 0) are NaN.
    """
    if neighbor_idx.shape[1] == 0:
        return np.full((neighbor_idx.shape[0],) + values.shape[1:], np.nan)
    return values[neighbor_idx].mean(axis=1)


def fit_plane_normals(neighborhoods: np.ndarray) -> np.ndarray:
    """Total-least-squares plane normal for each neighbourhood.

    Args:
        neighborhoods: (M, k, 3) point coordinates, one neighbourhood per row.

    Returns:
        (M, 3) unit normals: the eigenvector of the smallest eigenvalue of each
        centred covariance matrix. The sign is whatever the decomposition gives.
    """
    pts = np.asarray(neighborhoods, dtype=np.float64)
    if pts.shape[1] == 0:
        return np.full((pts.shape[0], 3), np.nan)
    centered = pts - pts.mean(axis=1, keepdims=True)
    cov = np.einsum("mki,mkj->mij", centered, centered) / pts.shape[1]
    # eigh sorts eigenvalues ascending
    _, eigvecs = np.linalg.eigh(cov)
    normals = eigvecs[:, :, 0]
    return normals / np.linalg.norm(normals, axis=1, keepdims=True)
