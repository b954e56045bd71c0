"""
Occupancy Grid and Mesh Voxelization Engine

This module provides:
- OccupancyGrid: Overlap bitmap plus the grid it was computed on
- Voxelizer: Engine converting triangle meshes into voxel-center point clouds
- voxelize: One-shot functional entry point

Memory consideration: the bitmap costs one byte per cell, so a 512³ grid
needs 128 MB. The default cell limit is the signed 32-bit index range.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple
import numpy as np

from .collector import collect_points
from .config import VoxelizerConfig
from .errors import InvalidParameterError
from .geometry import BoundingBox, as_scale_vector, build_triangles
from .grid import GridDescriptor, plan_grid
from .sweep import sweep

logger = logging.getLogger(__name__)


@dataclass
class OccupancyGrid:
    """
    Result of the overlap sweep.

    The bitmap is stored flat in cell index order; `occupancy` exposes it
    as an (x, y, z) view.
    """

    grid: GridDescriptor
    filled: np.ndarray

    @property
    def shape(self) -> Tuple[int, int, int]:
        """Get grid dimensions (x, y, z)."""
        return self.grid.dims

    @property
    def occupancy(self) -> np.ndarray:
        """Get binary occupancy mask of shape (x, y, z)."""
        return self.filled.reshape(self.grid.dims)

    @property
    def occupied_bounds(self) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
        """Get tight cell bounds around filled cells (exclusive max)."""
        occupied = np.argwhere(self.occupancy)
        if len(occupied) == 0:
            return ((0, 0, 0), (0, 0, 0))
        min_coords = occupied.min(axis=0)
        max_coords = occupied.max(axis=0) + 1
        return (
            tuple(int(v) for v in min_coords),
            tuple(int(v) for v in max_coords),
        )

    def is_filled(self, i: int, j: int, k: int) -> bool:
        """Check whether cell (i, j, k) overlaps the mesh."""
        x, y, z = self.grid.dims
        if not (0 <= i < x and 0 <= j < y and 0 <= k < z):
            return False
        return bool(self.filled[self.grid.encode_index(i, j, k)])

    def count_voxels(self) -> int:
        """Count filled cells."""
        return int(np.count_nonzero(self.filled))

    def to_sparse(self) -> np.ndarray:
        """
        Get filled cell coordinates.

        Returns:
            Array of shape (N, 3) with (i, j, k) in ascending index order
        """
        # argwhere walks C order, which is the linear cell order
        return np.argwhere(self.occupancy)

    def iterate_voxels(self) -> Iterator[Tuple[int, int, int]]:
        """Yield (i, j, k) for every filled cell."""
        for i, j, k in self.to_sparse():
            yield (int(i), int(j), int(k))

    def points(self) -> np.ndarray:
        """Get the world-space centers of filled cells."""
        return collect_points(self.filled, self.grid)


def _check_cube_size(cube_size: float) -> float:
    try:
        value = float(cube_size)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"Cube size must be a number: {e}") from e
    if not math.isfinite(value) or value <= 0:
        raise InvalidParameterError(f"Cube size must be > 0, got {cube_size}")
    return value


class Voxelizer:
    """
    Engine for converting triangle meshes to voxel point clouds.

    The voxelizer handles:
    - Triangle extraction with optional non-uniform scale
    - Grid planning over the mesh bounds
    - Parallel triangle/cube overlap testing
    - Collection of filled cube centers
    """

    def __init__(
        self,
        cube_size: float,
        use_scale: bool = False,
        scale=(1.0, 1.0, 1.0),
        config: Optional[VoxelizerConfig] = None
    ):
        """
        Initialize the voxelizer.

        Args:
            cube_size: Cube edge length (> 0)
            use_scale: Apply `scale` to the mesh and grid
            scale: Per-axis scale factor
            config: Compatibility and tuning options
        """
        self.cube_size = _check_cube_size(cube_size)
        self.use_scale = use_scale
        self.scale = as_scale_vector(scale) if use_scale else None
        self.config = (config or VoxelizerConfig()).validate()

        self._occupancy: Optional[OccupancyGrid] = None

    def plan(self, bounds: BoundingBox) -> GridDescriptor:
        """Plan the grid for a bounding box with this voxelizer's settings."""
        return plan_grid(
            bounds, self.cube_size, self.scale, self.config.dimension_mode
        )

    def voxelize(
        self,
        vertices: np.ndarray,
        indices: np.ndarray,
        bounds: Optional[BoundingBox] = None
    ) -> np.ndarray:
        """
        Voxelize a mesh.

        Args:
            vertices: Vertex positions of shape (V, 3)
            indices: Triangle indices (3F,) or (F, 3)
            bounds: Unscaled mesh bounds (default: computed from vertices)

        Returns:
            Array of shape (N, 3) with the centers of overlapping cubes
        """
        triangles = build_triangles(vertices, indices, self.scale)
        if bounds is None:
            bounds = BoundingBox.from_vertices(vertices)

        grid = self.plan(bounds)
        logger.info(
            "Voxelizing %d triangles on a %dx%dx%d grid",
            len(triangles), *grid.dims
        )

        filled = sweep(
            triangles,
            grid,
            mode=self.config.intersection_mode,
            workers=self.config.workers,
            chunk_size=self.config.chunk_size,
            max_cells=self.config.max_cells,
        )
        self._occupancy = OccupancyGrid(grid, filled)

        points = collect_points(filled, grid)
        if len(triangles) > 0 and len(points) == 0 and grid.cell_count > 0:
            logger.warning("No cell overlaps the mesh; try a smaller cube size")
        return points

    @property
    def grid(self) -> Optional[GridDescriptor]:
        """Get the grid of the last run."""
        return self._occupancy.grid if self._occupancy is not None else None

    @property
    def occupancy(self) -> Optional[OccupancyGrid]:
        """Get the overlap result of the last run."""
        return self._occupancy


def voxelize(
    vertices: np.ndarray,
    indices: np.ndarray,
    bounds: Optional[BoundingBox],
    scale,
    use_scale: bool,
    cube_size: float,
    config: Optional[VoxelizerConfig] = None
) -> np.ndarray:
    """
    Convert a mesh into the centers of the cubes it overlaps.

    Args:
        vertices: Vertex positions of shape (V, 3)
        indices: Triangle indices (3F,) or (F, 3)
        bounds: Unscaled mesh bounding box (None = from vertices)
        scale: Per-axis scale, used only when use_scale is True
        use_scale: Apply scale to triangles, grid size and grid origin
        cube_size: Cube edge length (> 0)
        config: Compatibility and tuning options

    Returns:
        Array of shape (N, 3), empty when nothing overlaps

    Raises:
        InvalidParameterError: Bad cube size, scale or tuning option
        InvalidGeometryError: Malformed vertex or index data
        ResourceExhaustionError: Grid too large
    """
    voxelizer = Voxelizer(
        cube_size,
        use_scale=use_scale,
        scale=scale if use_scale else (1.0, 1.0, 1.0),
        config=config,
    )
    return voxelizer.voxelize(vertices, indices, bounds)
