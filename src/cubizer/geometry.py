"""
Mesh Geometry Extraction

This module provides:
- BoundingBox: Axis-aligned box stored as (min corner, size)
- build_triangles: Flatten vertex/index buffers into world-space triangles

Triangles are stored as a dense (F, 3, 3) float64 array so the numba
kernels can read them without any Python objects in the loop.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np

from .errors import InvalidGeometryError, InvalidParameterError


@dataclass(frozen=True)
class BoundingBox:
    """
    Axis-aligned bounding box.

    Stored as minimum corner plus size, matching the mesh bounds the
    grid planner consumes.
    """

    min: Tuple[float, float, float]
    size: Tuple[float, float, float]

    def __post_init__(self):
        object.__setattr__(self, "min", tuple(float(v) for v in self.min))
        object.__setattr__(self, "size", tuple(float(v) for v in self.size))
        if len(self.min) != 3 or len(self.size) != 3:
            raise InvalidGeometryError("Bounding box min and size must be 3D")

    @classmethod
    def from_vertices(cls, vertices: np.ndarray) -> "BoundingBox":
        """
        Compute the tight box around a vertex array.

        Args:
            vertices: Array of shape (N, 3)

        Returns:
            BoundingBox (zero-sized at the origin for an empty array)
        """
        vertices = _as_vertex_array(vertices)
        if len(vertices) == 0:
            return cls((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))
        lo = vertices.min(axis=0)
        hi = vertices.max(axis=0)
        return cls(tuple(lo), tuple(hi - lo))

    @classmethod
    def from_min_max(cls, lo, hi) -> "BoundingBox":
        """Build a box from its two corners."""
        lo = np.asarray(lo, dtype=np.float64)
        hi = np.asarray(hi, dtype=np.float64)
        return cls(tuple(lo), tuple(hi - lo))

    @property
    def max(self) -> Tuple[float, float, float]:
        """Maximum corner."""
        return tuple(m + s for m, s in zip(self.min, self.size))

    @property
    def center(self) -> Tuple[float, float, float]:
        """Box center."""
        return tuple(m + s / 2 for m, s in zip(self.min, self.size))

    def scaled(self, scale: np.ndarray) -> "BoundingBox":
        """Return the box with min and size multiplied component-wise."""
        scale = as_scale_vector(scale)
        return BoundingBox(
            tuple(np.asarray(self.min) * scale),
            tuple(np.asarray(self.size) * scale),
        )


def as_scale_vector(scale) -> np.ndarray:
    """
    Validate a per-axis scale factor.

    Args:
        scale: Sequence of three finite numbers

    Returns:
        Array of shape (3,) float64
    """
    try:
        vec = np.asarray(scale, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"Scale must be three numbers: {e}") from e
    if vec.shape != (3,):
        raise InvalidParameterError(f"Scale must have shape (3,), got {vec.shape}")
    if not np.all(np.isfinite(vec)):
        raise InvalidParameterError("Scale components must be finite")
    return vec


def _as_vertex_array(vertices) -> np.ndarray:
    """Coerce vertices to (N, 3) float64."""
    try:
        arr = np.asarray(vertices, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidGeometryError(f"Vertices must be numeric: {e}") from e
    if arr.size == 0:
        return arr.reshape(0, 3)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise InvalidGeometryError(f"Vertices must have shape (N, 3), got {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise InvalidGeometryError("Vertices contain NaN or infinite coordinates")
    return arr


def _as_index_array(indices, vertex_count: int) -> np.ndarray:
    """Coerce triangle indices to a flat int64 array and range-check them."""
    arr = np.asarray(indices)
    if arr.size == 0:
        return np.zeros(0, dtype=np.int64)
    if not np.issubdtype(arr.dtype, np.integer):
        raise InvalidGeometryError(f"Indices must be integers, got dtype {arr.dtype}")

    flat = arr.reshape(-1).astype(np.int64)
    if len(flat) % 3 != 0:
        raise InvalidGeometryError(
            f"Index count {len(flat)} is not a multiple of 3"
        )
    if flat.min() < 0 or flat.max() >= vertex_count:
        raise InvalidGeometryError(
            f"Indices must lie in [0, {vertex_count}), "
            f"got range [{flat.min()}, {flat.max()}]"
        )
    return flat


def build_triangles(
    vertices: np.ndarray,
    indices: np.ndarray,
    scale: Optional[np.ndarray] = None
) -> np.ndarray:
    """
    Build the world-space triangle list from mesh buffers.

    Args:
        vertices: Vertex positions of shape (V, 3)
        indices: Triangle indices, flat (3F,) or shaped (F, 3)
        scale: Optional per-axis scale applied to every vertex

    Returns:
        Array of shape (F, 3, 3) where triangles[f, n] is corner n of face f

    Raises:
        InvalidGeometryError: Malformed vertices or indices
    """
    verts = _as_vertex_array(vertices)
    flat = _as_index_array(indices, len(verts))

    if scale is not None:
        # Must match BoundingBox.scaled exactly or triangles drift off the grid
        verts = verts * as_scale_vector(scale)

    triangles = verts[flat].reshape(-1, 3, 3)
    return np.ascontiguousarray(triangles, dtype=np.float64)
