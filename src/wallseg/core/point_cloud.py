"""In-memory point cloud: positions, normals, named scalar layers, neighbour search.

Positions and normals are kept in single precision at rest and handed out as
float64 copies for computation. Layers are float64. Neighbour search goes
through a scipy ``cKDTree`` built lazily on the current positions; writing
positions invalidates it.

Several layers may share a name, like in host applications that store layers
in a flat list. Readers go through ``get_layer`` which requires exactly one
match.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from scipy.spatial import cKDTree

from .errors import AmbiguousLayerError, InvalidInputError, MissingLayerError

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Layer:
    """Named per-point scalar array."""

    name: str
    values: np.ndarray


def _as_xyz(values, n: int | None, what: str) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise InvalidInputError(f"{what} must have shape (N, 3), got {arr.shape}")
    if n is not None and arr.shape[0] != n:
        raise InvalidInputError(f"{what} must have {n} rows, got {arr.shape[0]}")
    return arr


def _as_selected_xyz(values, expected_shape: tuple, what: str) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    if arr.shape != expected_shape:
        raise InvalidInputError(f"{what} for the selected points must have shape {expected_shape}, got {arr.shape}")
    return arr


class PointCloud:
    """Fixed-size ordered point set with neighbour queries and scalar layers."""

    def __init__(self, positions, normals=None):
        xyz = _as_xyz(positions, None, "positions")
        self._positions = xyz.astype(np.float32)
        self._normals: np.ndarray | None = None
        self._layers: list[Layer] = []
        self._tree: cKDTree | None = None
        if normals is not None:
            self.set_normals(normals)

    def __len__(self) -> int:
        return self.num_points

    def __repr__(self) -> str:
        return (
            f"PointCloud(num_points={self.num_points}, has_normals={self.has_normals}, "
            f"layers={self.layer_names})"
        )

    @property
    def num_points(self) -> int:
        return int(self._positions.shape[0])

    def all_points(self) -> np.ndarray:
        """Index range covering every point, in native order."""
        return np.arange(self.num_points, dtype=np.intp)

    # ── Positions / normals ──────────────────────────────────────────

    def get_positions(self, indices=None) -> np.ndarray:
        if indices is None:
            return self._positions.astype(np.float64)
        return self._positions[indices].astype(np.float64)

    def set_positions(self, values, indices=None) -> None:
        if indices is None:
            self._positions = _as_xyz(values, self.num_points, "positions").astype(np.float32)
        else:
            self._positions[indices] = _as_selected_xyz(values, self._positions[indices].shape, "positions")
        self._tree = None

    @property
    def has_normals(self) -> bool:
        return self._normals is not None

    def get_normals(self, indices=None) -> np.ndarray:
        if self._normals is None:
            raise InvalidInputError("Point cloud has no normals")
        if indices is None:
            return self._normals.astype(np.float64)
        return self._normals[indices].astype(np.float64)

    def set_normals(self, values, indices=None) -> None:
        if indices is None:
            self._normals = _as_xyz(values, self.num_points, "normals").astype(np.float32)
            return
        arr = _as_selected_xyz(values, self._positions[indices].shape, "normals")
        if self._normals is None:
            self._normals = np.zeros((self.num_points, 3), dtype=np.float32)
        self._normals[indices] = arr

    # ── Neighbour search ─────────────────────────────────────────────

    @property
    def kdtree(self) -> cKDTree:
        if self._tree is None:
            self._tree = cKDTree(self._positions.astype(np.float64))
            logger.debug(f"Built k-d tree over {self.num_points} points")
        return self._tree

    def find_k_nearest(self, query_positions, k: int, workers: int = 1) -> np.ndarray:
        """Indices of the k nearest points to each query position.

        k is clipped to the number of points. A query position that belongs to
        the cloud finds itself first.

        Returns:
            (M, k) index array, or (k,) for a single (3,) query.
        """
        query = np.asarray(query_positions, dtype=np.float64)
        single = query.ndim == 1
        query = query.reshape(-1, 3)
        k = min(int(k), self.num_points)
        if k <= 0 or len(query) == 0:
            idx = np.empty((len(query), 0), dtype=np.intp)
        else:
            _, idx = self.kdtree.query(query, k=k, workers=workers)
            idx = np.asarray(idx, dtype=np.intp).reshape(len(query), k)
        return idx[0] if single else idx

    def find_within_radius(self, centers, radius: float, workers: int = 1):
        """Indices of all points within ``radius`` of each center (self included).

        Returns:
            List of index arrays (unordered), or a single array for a (3,) center.
        """
        query = np.asarray(centers, dtype=np.float64)
        single = query.ndim == 1
        query = query.reshape(-1, 3)
        if len(query) == 0 or self.num_points == 0:
            result = [np.empty(0, dtype=np.intp) for _ in range(len(query))]
        else:
            found = self.kdtree.query_ball_point(
                query, r=float(radius), workers=workers, return_sorted=False
            )
            result = [np.asarray(nb, dtype=np.intp) for nb in found]
        return result[0] if single else result

    # ── Layers ───────────────────────────────────────────────────────

    @property
    def layer_names(self) -> list[str]:
        return [layer.name for layer in self._layers]

    def find_layers(self, name: str) -> list[Layer]:
        return [layer for layer in self._layers if layer.name == name]

    def create_layer(self, name: str, default_value: float = 0.0) -> Layer:
        """Append a new layer, even if one with the same name already exists."""
        layer = Layer(name=name, values=np.full(self.num_points, default_value, dtype=np.float64))
        self._layers.append(layer)
        return layer

    def get_layer(self, name: str) -> Layer:
        """Return the single layer called ``name``.

        Raises:
            MissingLayerError: no layer has this name.
            AmbiguousLayerError: more than one layer has this name.
        """
        layers = self.find_layers(name)
        if not layers:
            raise MissingLayerError(name)
        if len(layers) > 1:
            raise AmbiguousLayerError(name, len(layers))
        return layers[0]

    def get_layer_values(self, layer: Layer | str, indices=None) -> np.ndarray:
        if isinstance(layer, str):
            layer = self.get_layer(layer)
        if indices is None:
            return layer.values.copy()
        return layer.values[indices].copy()

    def set_layer_values(self, layer: Layer, values, indices=None) -> None:
        arr = np.asarray(values, dtype=np.float64)
        if indices is None:
            if arr.shape != (self.num_points,):
                raise InvalidInputError(
                    f"Layer '{layer.name}' needs {self.num_points} values, got shape {arr.shape}"
                )
            layer.values[:] = arr
        else:
            layer.values[indices] = arr

    def write_layer(self, name: str, values) -> Layer:
        """Store values under ``name``: the first layer with that name, or a new one."""
        layers = self.find_layers(name)
        layer = layers[0] if layers else self.create_layer(name, 0.0)
        self.set_layer_values(layer, values)
        return layer
