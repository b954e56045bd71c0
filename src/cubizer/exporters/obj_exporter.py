"""
Wavefront OBJ Exporter

Two modes:
- "points": one `v` line per cube center (importers show a vertex cloud)
- "cubes": one closed cube per point, edge length equal to the cube size,
  for checking a voxelization by eye in any 3D package

Cube mode writes 8 vertices and 12 triangles per point, so keep it to
clouds of a few hundred thousand points.
"""

from pathlib import Path
from typing import Union
import numpy as np

from ..interfaces import PointCloud

# Unit cube corners around the origin, and outward-facing triangles
_CUBE_CORNERS = np.array([
    [-0.5, -0.5, -0.5], [0.5, -0.5, -0.5], [0.5, 0.5, -0.5], [-0.5, 0.5, -0.5],
    [-0.5, -0.5, 0.5], [0.5, -0.5, 0.5], [0.5, 0.5, 0.5], [-0.5, 0.5, 0.5],
], dtype=np.float64)

_CUBE_FACES = np.array([
    [0, 2, 1], [0, 3, 2],   # -Z
    [4, 5, 6], [4, 6, 7],   # +Z
    [0, 4, 7], [0, 7, 3],   # -X
    [1, 2, 6], [1, 6, 5],   # +X
    [0, 1, 5], [0, 5, 4],   # -Y
    [3, 7, 6], [3, 6, 2],   # +Y
], dtype=np.int64)


def marker_cubes(points: np.ndarray, cube_size: float):
    """
    Build one cube mesh per point.

    Args:
        points: Cube centers of shape (N, 3)
        cube_size: Cube edge length

    Returns:
        Tuple of (vertices (8N, 3), faces (12N, 3) zero-based)
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    vertices = (points[:, None, :] + _CUBE_CORNERS[None, :, :] * cube_size).reshape(-1, 3)
    offsets = (np.arange(len(points)) * 8)[:, None, None]
    faces = (_CUBE_FACES[None, :, :] + offsets).reshape(-1, 3)
    return vertices, faces


class OBJExporter:
    """
    Export a point cloud to Wavefront OBJ format.
    """

    def __init__(self, mode: str = "points"):
        """
        Initialize the exporter.

        Args:
            mode: "points" for bare vertices, "cubes" for marker cubes
        """
        if mode not in ("points", "cubes"):
            raise ValueError(f"Unknown OBJ export mode: {mode}")
        self.mode = mode

    def export(
        self,
        cloud: PointCloud,
        output_path: Union[str, Path]
    ):
        """
        Export point cloud to OBJ file.

        Args:
            cloud: PointCloud from the voxelizer
            output_path: Output file path (.obj)
        """
        output_path = Path(output_path)
        points = np.asarray(cloud.points, dtype=np.float64).reshape(-1, 3)

        lines = []
        lines.append("# Cubizer OBJ Export")
        lines.append(f"# Points: {len(points)}")
        lines.append(f"# Cube size: {cloud.cube_size!r}")
        lines.append("")
        lines.append(f"o {cloud.name}")
        lines.append("")

        if self.mode == "cubes":
            vertices, faces = marker_cubes(points, cloud.cube_size)
            for v in vertices:
                lines.append(f"v {v[0]:.6f} {v[1]:.6f} {v[2]:.6f}")
            lines.append("")
            for i, face in enumerate(faces):
                if i % 12 == 0:
                    lines.append(f"g Cube_{i // 12}")
                lines.append(f"f {face[0] + 1} {face[1] + 1} {face[2] + 1}")
        else:
            for v in points:
                lines.append(f"v {v[0]:.6f} {v[1]:.6f} {v[2]:.6f}")

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write('\n'.join(lines) + '\n')
