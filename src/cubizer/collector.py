"""
Point Collection

Turns the overlap bitmap into the ordered point cloud. Points come out in
ascending cell index order (x slowest, z fastest) regardless of how the
sweep was scheduled.
"""

import numpy as np
from numba import njit

from .grid import GridDescriptor, _cell_center, _decode_index


@njit(cache=True)
def _collect_points(
    filled: np.ndarray,
    origin: np.ndarray,
    cube_size: float,
    dim_y: int,
    dim_z: int
) -> np.ndarray:
    count = 0
    for index in range(filled.shape[0]):
        if filled[index]:
            count += 1

    points = np.empty((count, 3), dtype=np.float64)
    n = 0
    for index in range(filled.shape[0]):
        if filled[index]:
            i, j, k = _decode_index(index, dim_y, dim_z)
            cx, cy, cz = _cell_center(origin, cube_size, i, j, k)
            points[n, 0] = cx
            points[n, 1] = cy
            points[n, 2] = cz
            n += 1
    return points


def collect_points(filled: np.ndarray, grid: GridDescriptor) -> np.ndarray:
    """
    Emit the center of every filled cell.

    Args:
        filled: Overlap bitmap of shape (x * y * z,)
        grid: Grid the bitmap was computed on

    Returns:
        Array of shape (N, 3) float64, in ascending cell index order
    """
    filled = np.ascontiguousarray(filled, dtype=np.bool_).reshape(-1)
    if len(filled) != grid.cell_count:
        raise ValueError(
            f"Bitmap has {len(filled)} entries, grid has {grid.cell_count} cells"
        )
    if len(filled) == 0:
        return np.zeros((0, 3), dtype=np.float64)

    _, dim_y, dim_z = grid.dims
    return _collect_points(filled, grid.origin_array, grid.cube_size, dim_y, dim_z)
