"""
Cubizer
=======

Triangle mesh voxelization into cube-center point clouds.

Given a mesh and a cube edge length, Cubizer lays a regular grid over the
mesh bounds, tests every grid cube against every triangle with a
separating-axis test, and returns the centers of the cubes that overlap
the surface.

Key Features:
- 13-axis triangle/box separating-axis test compiled with Numba
- Data-parallel overlap sweep over cell index chunks (numba prange)
- Deterministic output order independent of thread count
- Optional non-uniform object scale applied to mesh and grid alike
- Formula-for-formula reproduction of the reference bake, or corrected formulas
- Export to PLY point clouds and OBJ (points or marker cubes)

Example Usage:
    from cubizer import Cubizer

    cubizer = Cubizer(cube_size=0.25)
    cubizer.load_mesh("bunny.obj")
    cubizer.voxelize()
    cubizer.export_ply("bunny_Cubizied.ply")
"""

__version__ = "1.0.0"
__author__ = "Cubizer Team"

from .config import DimensionMode, IntersectionMode, VoxelizerConfig
from .errors import (
    CubizerError,
    InvalidGeometryError,
    InvalidParameterError,
    ResourceExhaustionError,
)
from .geometry import BoundingBox, build_triangles
from .grid import GridDescriptor, plan_grid
from .intersection import triangle_box_overlap
from .sweep import sweep
from .collector import collect_points
from .voxelizer import OccupancyGrid, Voxelizer, voxelize
from .interfaces import MeshSource, PointCloud, PointCloudSink
from .ingestion import MeshLoader
from .generator import Cubizer, BatchProcessor

__all__ = [
    "Cubizer",
    "BatchProcessor",
    "Voxelizer",
    "voxelize",
    "OccupancyGrid",
    "VoxelizerConfig",
    "DimensionMode",
    "IntersectionMode",
    "BoundingBox",
    "build_triangles",
    "GridDescriptor",
    "plan_grid",
    "triangle_box_overlap",
    "sweep",
    "collect_points",
    "MeshLoader",
    "MeshSource",
    "PointCloud",
    "PointCloudSink",
    "CubizerError",
    "InvalidParameterError",
    "InvalidGeometryError",
    "ResourceExhaustionError",
]
