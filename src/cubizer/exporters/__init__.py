"""
Export modules for voxelized point clouds.

Supported formats:
- Stanford PLY (.ply) - Point cloud with cube size metadata
- Wavefront (.obj) - Bare points, or one marker cube per point for inspection
"""

from .ply_exporter import PLYExporter
from .obj_exporter import OBJExporter

__all__ = ["PLYExporter", "OBJExporter"]
