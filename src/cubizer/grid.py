"""
Grid Planning

Lays a regular grid of cubes over a mesh's bounding box.

Cells are addressed by a single linear index with x varying slowest and
z fastest:

    i = idx // (y * z)
    j = (idx % (y * z)) // z
    k = idx % z

The compiled helpers here are shared by the overlap sweep and the point
collector so both compute bit-identical cell centers.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np
from numba import njit

from .config import DimensionMode
from .geometry import BoundingBox, as_scale_vector

logger = logging.getLogger(__name__)


@njit(cache=True)
def _decode_index(index: int, dim_y: int, dim_z: int) -> Tuple[int, int, int]:
    """Split a linear cell index into (i, j, k)."""
    plane = dim_y * dim_z
    i = index // plane
    j = (index % plane) // dim_z
    k = index % dim_z
    return i, j, k


@njit(cache=True)
def _cell_center(
    origin: np.ndarray,
    cube_size: float,
    i: int, j: int, k: int
) -> Tuple[float, float, float]:
    """Center of cell (i, j, k): origin, then half a cube, then i cubes."""
    half = cube_size / 2.0
    cx = (origin[0] + half) + cube_size * i
    cy = (origin[1] + half) + cube_size * j
    cz = (origin[2] + half) + cube_size * k
    return cx, cy, cz


@dataclass(frozen=True)
class GridDescriptor:
    """
    Immutable description of a voxel grid.

    Attributes:
        dims: Cell counts along (x, y, z)
        cube_size: Cube edge length
        origin: Minimum corner of the grid
    """

    dims: Tuple[int, int, int]
    cube_size: float
    origin: Tuple[float, float, float]

    @property
    def shape(self) -> Tuple[int, int, int]:
        """Alias for dims, in numpy's shape order."""
        return self.dims

    @property
    def cell_count(self) -> int:
        """Total number of cells (x * y * z)."""
        x, y, z = self.dims
        return x * y * z

    @property
    def cell_extents(self) -> Tuple[float, float, float]:
        """Half-width of every cell box, which is the full cube size."""
        return (self.cube_size, self.cube_size, self.cube_size)

    @property
    def origin_array(self) -> np.ndarray:
        """Origin as a contiguous float64 array for the kernels."""
        return np.array(self.origin, dtype=np.float64)

    def decode_index(self, index: int) -> Tuple[int, int, int]:
        """Convert a linear index into (i, j, k)."""
        if not 0 <= index < self.cell_count:
            raise IndexError(f"Cell index {index} outside [0, {self.cell_count})")
        _, y, z = self.dims
        i, j, k = _decode_index(index, y, z)
        return int(i), int(j), int(k)

    def encode_index(self, i: int, j: int, k: int) -> int:
        """Convert (i, j, k) into a linear index."""
        _, y, z = self.dims
        return (i * y + j) * z + k

    def cell_center(self, i: int, j: int, k: int) -> Tuple[float, float, float]:
        """World-space center of cell (i, j, k)."""
        cx, cy, cz = _cell_center(self.origin_array, self.cube_size, i, j, k)
        return (float(cx), float(cy), float(cz))


def plan_grid(
    bounds: BoundingBox,
    cube_size: float,
    scale: Optional[np.ndarray] = None,
    dimension_mode: DimensionMode = DimensionMode.LITERAL
) -> GridDescriptor:
    """
    Compute grid dimensions and origin for a bounding box.

    The caller is responsible for rejecting a zero cube size.

    Args:
        bounds: Mesh bounding box (min + size)
        cube_size: Cube edge length
        scale: Optional per-axis scale applied to size and origin
        dimension_mode: LITERAL derives x from size.z; CORRECTED from size.x

    Returns:
        GridDescriptor
    """
    size = np.asarray(bounds.size, dtype=np.float64)
    origin = np.asarray(bounds.min, dtype=np.float64)

    if scale is not None:
        scale = as_scale_vector(scale)
        size = size * scale
        origin = origin * scale

    # int() truncates toward zero
    if dimension_mode == DimensionMode.LITERAL:
        x = int(size[2] / cube_size)
    else:
        x = int(size[0] / cube_size)
    y = int(size[1] / cube_size)
    z = int(size[2] / cube_size)

    if min(x, y, z) < 0:
        logger.warning(
            "Negative grid dimensions (%d, %d, %d) clamped to zero; "
            "check for a negative scale component", x, y, z
        )
        x, y, z = max(x, 0), max(y, 0), max(z, 0)

    grid = GridDescriptor(
        dims=(x, y, z),
        cube_size=float(cube_size),
        origin=tuple(float(v) for v in origin),
    )
    logger.debug(
        "Planned %s grid %s (cube %.6g, origin %s)",
        dimension_mode.value, grid.dims, grid.cube_size, grid.origin
    )
    return grid
