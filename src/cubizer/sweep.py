"""
Parallel Overlap Sweep with Numba JIT Compilation

Marks every grid cell whose box overlaps at least one triangle.

The sweep is a pure map over cell indices: each cell reads the shared
triangle array and writes only its own bitmap entry, so the index range
is split into contiguous chunks and handed to numba's `prange` without
any locking. The result does not depend on thread count or chunk size.
"""

import logging
import time
from typing import Optional
import numpy as np
import numba
from numba import njit, prange

from .config import DEFAULT_CHUNK_SIZE, DEFAULT_MAX_CELLS, IntersectionMode
from .errors import InvalidParameterError, ResourceExhaustionError
from .grid import GridDescriptor, _cell_center, _decode_index
from .intersection import _tri_box_overlap

logger = logging.getLogger(__name__)


@njit(cache=True)
def _sweep_range(
    triangles: np.ndarray,
    origin: np.ndarray,
    cube_size: float,
    dim_y: int,
    dim_z: int,
    literal: bool,
    start: int,
    stop: int,
    result: np.ndarray
):
    """Fill result[start:stop], stopping at the first hit per cell."""
    for index in range(start, stop):
        i, j, k = _decode_index(index, dim_y, dim_z)
        cx, cy, cz = _cell_center(origin, cube_size, i, j, k)

        for t in range(triangles.shape[0]):
            if _tri_box_overlap(
                triangles[t], cx, cy, cz,
                cube_size, cube_size, cube_size,
                literal
            ):
                result[index] = True
                break


@njit(cache=True, parallel=True)
def _sweep_parallel(
    triangles: np.ndarray,
    origin: np.ndarray,
    cube_size: float,
    dim_y: int,
    dim_z: int,
    literal: bool,
    chunk_size: int,
    result: np.ndarray
):
    """Run _sweep_range over chunks of the index range in parallel."""
    total = result.shape[0]
    num_chunks = (total + chunk_size - 1) // chunk_size
    for chunk in prange(num_chunks):
        start = chunk * chunk_size
        stop = min(start + chunk_size, total)
        _sweep_range(
            triangles, origin, cube_size, dim_y, dim_z, literal,
            start, stop, result
        )


def allocate_bitmap(cell_count: int, max_cells: int = DEFAULT_MAX_CELLS) -> np.ndarray:
    """
    Allocate a cleared overlap bitmap.

    Args:
        cell_count: Number of cells (x * y * z)
        max_cells: Refuse to allocate beyond this many cells

    Returns:
        Boolean array of shape (cell_count,)

    Raises:
        ResourceExhaustionError: Grid too large or allocation failed
    """
    if cell_count > max_cells:
        raise ResourceExhaustionError(
            f"Grid of {cell_count} cells exceeds the limit of {max_cells}; "
            "increase the cube size"
        )
    try:
        return np.zeros(cell_count, dtype=np.bool_)
    except MemoryError as e:
        raise ResourceExhaustionError(
            f"Cannot allocate bitmap for {cell_count} cells"
        ) from e


def sweep(
    triangles: np.ndarray,
    grid: GridDescriptor,
    mode: IntersectionMode = IntersectionMode.LITERAL,
    workers: Optional[int] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    max_cells: int = DEFAULT_MAX_CELLS
) -> np.ndarray:
    """
    Test every grid cell against every triangle.

    Args:
        triangles: Triangle array of shape (F, 3, 3)
        grid: Grid to sweep
        mode: Intersection formula set
        workers: Thread count (None = numba default, 1 = serial)
        chunk_size: Cells per parallel work item
        max_cells: Allocation limit

    Returns:
        Overlap bitmap of shape (x * y * z,), True where a cell is filled
    """
    if workers is not None and workers < 1:
        raise InvalidParameterError(f"workers must be >= 1, got {workers}")
    if chunk_size < 1:
        raise InvalidParameterError(f"chunk_size must be >= 1, got {chunk_size}")

    result = allocate_bitmap(grid.cell_count, max_cells)
    if len(result) == 0 or len(triangles) == 0:
        return result

    tris = np.ascontiguousarray(triangles, dtype=np.float64)
    origin = grid.origin_array
    _, dim_y, dim_z = grid.dims
    literal = IntersectionMode(mode) == IntersectionMode.LITERAL

    start_time = time.perf_counter()

    if workers == 1:
        _sweep_range(
            tris, origin, grid.cube_size, dim_y, dim_z, literal,
            0, len(result), result
        )
    else:
        previous = numba.get_num_threads()
        if workers is not None:
            numba.set_num_threads(min(workers, numba.config.NUMBA_NUM_THREADS))
        try:
            _sweep_parallel(
                tris, origin, grid.cube_size, dim_y, dim_z, literal,
                chunk_size, result
            )
        finally:
            numba.set_num_threads(previous)

    logger.debug(
        "Swept %d cells x %d triangles in %.3fs (%d filled)",
        len(result), len(tris), time.perf_counter() - start_time,
        int(result.sum())
    )
    return result
